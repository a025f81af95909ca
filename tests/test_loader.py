"""Tests for the module loader: dispatch, caching, deduplication and failures."""

import asyncio

import httpx
import pytest
from edon_modules.cache import ContentCache
from edon_modules.errors import ErrorKind
from edon_modules.errors import FileReadError
from edon_modules.errors import InvalidSpecifierError
from edon_modules.errors import JSRNotImplementedError
from edon_modules.errors import ModuleNotFoundError
from edon_modules.errors import PackageNotFoundError
from edon_modules.errors import UnsupportedModuleKindError
from edon_modules.loader import ModuleLoader
from edon_modules.models import Module
from edon_modules.models import Scheme
from edon_modules.resolvers import ModuleResolver


class CountingResolver(ModuleResolver):
    """Resolver that counts calls and can be held or made to fail."""

    scheme = Scheme.LOCAL

    def __init__(self, content="export default 1;", error=None, delay=0.0):
        self.calls = 0
        self.content = content
        self.error = error
        self.delay = delay

    async def resolve(self, specifier: str) -> Module:
        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return Module(specifier=specifier, content=self.content, scheme=self.scheme)


def _loader(settings, **resolvers) -> ModuleLoader:
    mapping = {Scheme(name): resolver for name, resolver in resolvers.items()}
    return ModuleLoader(settings, http_client=httpx.AsyncClient(), resolvers=mapping)


class TestModuleLoaderCaching:
    @pytest.mark.asyncio
    async def test_second_load_is_served_from_cache(self, settings):
        resolver = CountingResolver()
        loader = _loader(settings, local=resolver)

        first = await loader.load("./a.js")
        second = await loader.load("./a.js")

        assert first is second
        assert resolver.calls == 1
        assert "./a.js" in loader.cache

    @pytest.mark.asyncio
    async def test_concurrent_loads_resolve_once(self, settings):
        resolver = CountingResolver(delay=0.02)
        loader = _loader(settings, local=resolver)

        results = await asyncio.gather(*(loader.load("./shared.js") for _ in range(10)))

        assert resolver.calls == 1
        assert all(r is results[0] for r in results)

    @pytest.mark.asyncio
    async def test_distinct_specifiers_resolve_separately(self, settings):
        resolver = CountingResolver()
        loader = _loader(settings, local=resolver)

        await asyncio.gather(loader.load("./a.js"), loader.load("a.js"))

        assert resolver.calls == 2
        assert len(loader.cache) == 2

    @pytest.mark.asyncio
    async def test_failure_is_not_cached(self, settings):
        resolver = CountingResolver(error=FileReadError("boom"))
        loader = _loader(settings, local=resolver)

        with pytest.raises(FileReadError):
            await loader.load("./broken.js")
        assert "./broken.js" not in loader.cache

        resolver.error = None
        module = await loader.load("./broken.js")
        assert module.content == "export default 1;"
        assert resolver.calls == 2

    @pytest.mark.asyncio
    async def test_concurrent_failure_reaches_every_caller(self, settings):
        resolver = CountingResolver(error=ModuleNotFoundError("gone"), delay=0.02)
        loader = _loader(settings, local=resolver)

        results = await asyncio.gather(*(loader.load("./x.js") for _ in range(3)), return_exceptions=True)

        assert resolver.calls == 1
        assert all(isinstance(r, ModuleNotFoundError) for r in results)

    @pytest.mark.asyncio
    async def test_injected_cache_is_used(self, settings):
        cache = ContentCache()
        preloaded = Module(specifier="./pre.js", content="pre", scheme=Scheme.LOCAL)
        cache.put("./pre.js", preloaded)
        resolver = CountingResolver()

        loader = ModuleLoader(settings, cache=cache, http_client=httpx.AsyncClient(), resolvers={Scheme.LOCAL: resolver})

        assert await loader.load("./pre.js") is preloaded
        assert resolver.calls == 0


class TestModuleLoaderErrors:
    @pytest.mark.asyncio
    async def test_invalid_specifier_never_reaches_resolver(self, settings):
        resolver = CountingResolver()
        loader = _loader(settings, npm=resolver)

        with pytest.raises(InvalidSpecifierError) as exc_info:
            await loader.load("npm:@scope")

        assert exc_info.value.kind == ErrorKind.INVALID_SPECIFIER
        assert exc_info.value.specifier == "npm:@scope"
        assert resolver.calls == 0

    @pytest.mark.asyncio
    async def test_empty_specifier_is_invalid(self, settings):
        with pytest.raises(InvalidSpecifierError):
            await _loader(settings).load("")

    @pytest.mark.asyncio
    async def test_missing_resolver_is_unsupported_kind(self, settings):
        loader = _loader(settings, local=CountingResolver())

        with pytest.raises(UnsupportedModuleKindError) as exc_info:
            await loader.load("https://cdn.example.com/x.js")

        assert exc_info.value.kind == ErrorKind.UNSUPPORTED_MODULE_KIND

    @pytest.mark.asyncio
    async def test_resolver_error_kind_is_preserved_and_tagged(self, settings):
        loader = _loader(settings, npm=CountingResolver(error=PackageNotFoundError("no such package")))

        with pytest.raises(PackageNotFoundError) as exc_info:
            await loader.load("npm:ghost@1.0.0")

        assert exc_info.value.specifier == "npm:ghost@1.0.0"

    @pytest.mark.asyncio
    async def test_unexpected_os_error_becomes_module_not_found(self, settings):
        loader = _loader(settings, local=CountingResolver(error=PermissionError("denied")))

        with pytest.raises(ModuleNotFoundError) as exc_info:
            await loader.load("./secret.js")

        assert isinstance(exc_info.value.__cause__, PermissionError)

    @pytest.mark.asyncio
    async def test_unexpected_runtime_error_becomes_module_not_found(self, settings):
        loader = _loader(settings, local=CountingResolver(error=RuntimeError("Symlink loop from '/pkg/loop.js'")))

        with pytest.raises(ModuleNotFoundError) as exc_info:
            await loader.load("./loop.js")

        assert exc_info.value.specifier == "./loop.js"
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    @pytest.mark.asyncio
    async def test_default_jsr_resolver_is_not_implemented(self, settings):
        async with ModuleLoader(settings) as loader:
            with pytest.raises(JSRNotImplementedError):
                await loader.load("jsr:@std/path")

    @pytest.mark.asyncio
    async def test_register_resolver_enables_scheme(self, settings):
        loader = _loader(settings)
        resolver = CountingResolver()

        loader.register_resolver(Scheme.CDN, resolver)
        module = await loader.load("https://cdn.example.com/x.js")

        assert module.content == "export default 1;"
        assert resolver.calls == 1


class TestModuleLoaderCancellation:
    @pytest.mark.asyncio
    async def test_timeout_is_module_not_found_and_leaves_cache_empty(self, settings):
        resolver = CountingResolver(delay=10)
        loader = _loader(settings, local=resolver)

        with pytest.raises(ModuleNotFoundError, match="Timed out") as exc_info:
            await loader.load("./slow.js", timeout=0.05)

        assert exc_info.value.kind == ErrorKind.MODULE_NOT_FOUND
        assert exc_info.value.specifier == "./slow.js"
        assert isinstance(exc_info.value.__cause__, TimeoutError)

        assert "./slow.js" not in loader.cache
        await asyncio.sleep(0.01)
        assert len(loader._flights) == 0

    @pytest.mark.asyncio
    async def test_cancelled_load_allows_retry(self, settings):
        resolver = CountingResolver(delay=10)
        loader = _loader(settings, local=resolver)

        task = asyncio.create_task(loader.load("./slow.js"))
        await asyncio.sleep(0.01)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        resolver.delay = 0
        module = await loader.load("./slow.js")
        assert module.specifier == "./slow.js"
        assert resolver.calls == 2

    @pytest.mark.asyncio
    async def test_one_cancelled_waiter_does_not_affect_others(self, settings):
        resolver = CountingResolver(delay=0.05)
        loader = _loader(settings, local=resolver)

        impatient = asyncio.create_task(loader.load("./shared.js"))
        patient = asyncio.create_task(loader.load("./shared.js"))
        await asyncio.sleep(0.01)
        impatient.cancel()

        module = await patient
        assert module.specifier == "./shared.js"
        assert resolver.calls == 1
        assert loader.cache.get("./shared.js") is module

    @pytest.mark.asyncio
    async def test_load_started_right_after_cancel_is_unaffected(self, settings):
        resolver = CountingResolver(delay=0.05)
        loader = _loader(settings, local=resolver)

        cancelled = asyncio.create_task(loader.load("./m.js"))
        await asyncio.sleep(0.01)
        cancelled.cancel()
        follower = asyncio.create_task(loader.load("./m.js"))

        with pytest.raises(asyncio.CancelledError):
            await cancelled
        module = await follower

        assert module.specifier == "./m.js"
        assert resolver.calls == 2
        assert loader.cache.get("./m.js") is module


class TestModuleLoaderEndToEnd:
    @pytest.mark.asyncio
    async def test_local_file(self, settings, tmp_path, monkeypatch):
        (tmp_path / "main.js").write_text("console.log(1);")
        monkeypatch.chdir(tmp_path)

        async with ModuleLoader(settings) as loader:
            assert await loader.load_source("./main.js") == "console.log(1);"

    @pytest.mark.asyncio
    async def test_cdn_via_injected_client(self, settings, make_client):
        hits = []

        def handler(request):
            hits.append(str(request.url))
            return httpx.Response(200, text="export const x = 1;")

        async with make_client(handler) as client:
            loader = ModuleLoader(settings, http_client=client)
            for _ in range(3):
                module = await loader.load("https://esm.sh/x")
            await loader.aclose()

            # The injected client stays usable
            assert not client.is_closed

        assert module.scheme == Scheme.CDN
        assert hits == ["https://esm.sh/x"]

    @pytest.mark.asyncio
    async def test_npm_installs_into_home(self, settings, make_client):
        def handler(request):
            return httpx.Response(200, json={"name": "left-pad", "version": "1.3.0"})

        async with make_client(handler) as client:
            loader = ModuleLoader(settings, http_client=client)
            module = await loader.load("npm:left-pad@1.3.0")

        assert module.scheme == Scheme.NPM
        assert "left-pad@1.3.0" in module.content
        assert (settings.home / "npm-cache" / "left-pad" / "1.3.0" / "index.js").is_file()
