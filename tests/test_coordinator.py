""" Test save/load orchestration across tiers and fallbacks. """
import pytest
from unittest.mock import MagicMock, patch

from syskit import codec
from syskit.coordinator import PersistenceCoordinator
from syskit.errors import AllBackendsExhausted, BackendUnavailable, InvalidInput
from syskit.selector import BackendSelector
from syskit.storage.address import HIDDEN_ADDRESS_MODERN, GENERIC_ADDRESS
from syskit.storage.catalog import CatalogBackend, CatalogService
from syskit.storage.direct_path import DirectPathBackend
from syskit.tiers import CapabilityTier


@pytest.fixture
def catalog(tmp_path):
    service = CatalogService(str(tmp_path / "catalog"))
    yield service
    service.close()


@pytest.fixture
def selector(tmp_path, catalog):
    return BackendSelector(
        direct_backend=DirectPathBackend(str(tmp_path / "sdcard")),
        catalog_backend=CatalogBackend(catalog),
    )


@pytest.fixture
def legacy(selector):
    return PersistenceCoordinator(lambda: CapabilityTier.LEGACY, selector)


@pytest.fixture
def modern(selector):
    return PersistenceCoordinator(lambda: CapabilityTier.MODERN, selector)


def _mock_backend(name, write_result=True, read_result=None):
    backend = MagicMock()
    backend.name = name
    backend.write.return_value = write_result
    backend.read.return_value = read_result
    return backend


TEXTS = ["hello\nworld", "", "héllo – 你好 🙂", "trailing newline\n", "\r\n\r\n"]


@pytest.mark.parametrize("tier_name", ["legacy", "modern"])
@pytest.mark.parametrize("text", TEXTS)
def test_round_trip(request, tier_name, text):
    coordinator = request.getfixturevalue(tier_name)
    assert coordinator.save(text) is True
    assert coordinator.load() == text


def test_legacy_layout_on_disk(legacy, tmp_path):
    legacy.save("hello")
    filepath = tmp_path / "sdcard" / "Android" / "syskit" / ".sysdata"
    assert filepath.read_bytes() == b"aGVsbG8="


def test_modern_layout_in_catalog(modern, catalog):
    modern.save("hello")
    records = catalog.list_records()
    assert len(records) == 1
    assert records[0]["relative_path"] == "Documents/Android/syskit/"
    assert records[0]["display_name"] == "sysdata"


def test_load_returns_none_when_nothing_saved(legacy, modern):
    assert legacy.load() is None
    assert modern.load() is None


def test_repeated_loads_are_stable(modern):
    modern.save("stable")
    assert modern.load() == "stable"
    assert modern.load() == "stable"


def test_latest_save_wins(modern):
    modern.save("hello\nworld")
    modern.save("")
    assert modern.load() == ""


def test_fallback_to_generic_address_on_primary_failure(modern, catalog):
    insert_record = catalog.insert_record

    def refuse_hidden_dir(display_name, mime_type, relative_path):
        if relative_path == HIDDEN_ADDRESS_MODERN.normalized_directory:
            raise BackendUnavailable("directory policy")
        return insert_record(display_name, mime_type, relative_path)

    with patch.object(catalog, "insert_record", side_effect=refuse_hidden_dir):
        assert modern.save("x") is True

    assert catalog.query("Documents/Android/syskit/", "sysdata") == []
    assert len(catalog.query("Documents/", "sysdata")) == 1
    assert modern.load() == "x"


def test_save_writes_to_exactly_one_location(modern, catalog):
    modern.save("once")
    assert len(catalog.list_records()) == 1


def test_load_skips_undecodable_primary(modern, catalog):
    backend = CatalogBackend(catalog)
    backend.write(HIDDEN_ADDRESS_MODERN, "this is not base64!")
    backend.write(GENERIC_ADDRESS, codec.encode("from fallback"))

    assert modern.load() == "from fallback"


def test_load_returns_none_when_only_garbage_stored(legacy, tmp_path):
    filepath = tmp_path / "sdcard" / "Android" / "syskit" / ".sysdata"
    filepath.parent.mkdir(parents=True)
    filepath.write_text("@@garbage@@")
    assert legacy.load() is None


def test_tiers_are_isolated(legacy, modern):
    legacy.save("legacy value")
    assert modern.load() is None

    modern.save("modern value")
    assert legacy.load() == "legacy value"
    assert modern.load() == "modern value"


def test_save_none_fails_fast():
    primary = _mock_backend("primary")
    selector = MagicMock()
    selector.ordered_backends.return_value = [(primary, GENERIC_ADDRESS)]
    coordinator = PersistenceCoordinator(lambda: CapabilityTier.MODERN, selector)

    with pytest.raises(InvalidInput):
        coordinator.save(None)
    with pytest.raises(InvalidInput):
        coordinator.save(42)
    primary.write.assert_not_called()


def test_save_stops_at_first_success():
    primary = _mock_backend("primary", write_result=True)
    secondary = _mock_backend("secondary", write_result=True)
    selector = MagicMock()
    selector.ordered_backends.return_value = [
        (primary, HIDDEN_ADDRESS_MODERN),
        (secondary, GENERIC_ADDRESS),
    ]
    coordinator = PersistenceCoordinator(lambda: CapabilityTier.MODERN, selector)

    assert coordinator.save("payload") is True
    primary.write.assert_called_once_with(HIDDEN_ADDRESS_MODERN, codec.encode("payload"))
    secondary.write.assert_not_called()


def test_save_returns_false_when_all_backends_fail():
    primary = _mock_backend("primary", write_result=False)
    secondary = _mock_backend("secondary", write_result=False)
    selector = MagicMock()
    selector.ordered_backends.return_value = [
        (primary, HIDDEN_ADDRESS_MODERN),
        (secondary, GENERIC_ADDRESS),
    ]
    coordinator = PersistenceCoordinator(lambda: CapabilityTier.MODERN, selector)

    assert coordinator.save("payload") is False
    secondary.write.assert_called_once()

    with pytest.raises(AllBackendsExhausted) as excinfo:
        coordinator._write_chain("cGF5bG9hZA==")
    assert excinfo.value.attempted == [
        "primary:Documents/Android/syskit/sysdata",
        "secondary:Documents/sysdata",
    ]


def test_load_first_match_wins():
    primary = _mock_backend("primary", read_result=codec.encode("first"))
    secondary = _mock_backend("secondary", read_result=codec.encode("second"))
    selector = MagicMock()
    selector.ordered_backends.return_value = [
        (primary, HIDDEN_ADDRESS_MODERN),
        (secondary, GENERIC_ADDRESS),
    ]
    coordinator = PersistenceCoordinator(lambda: CapabilityTier.MODERN, selector)

    assert coordinator.load() == "first"
    secondary.read.assert_not_called()


def test_tier_is_probed_once(selector):
    probe = MagicMock(return_value=CapabilityTier.MODERN)
    coordinator = PersistenceCoordinator(probe, selector)
    coordinator.save("a")
    coordinator.load()
    probe.assert_called_once_with()


def test_describe(modern):
    modern.save("described")
    info = modern.describe()
    assert info["tier"] == "MODERN"
    assert info["candidates"] == [
        {"backend": "catalog", "address": "Documents/Android/syskit/sysdata", "records": 1},
        {"backend": "catalog", "address": "Documents/sysdata", "records": 0},
    ]


def test_load_with_unreadable_storage_tree(legacy):
    legacy.save("hidden")
    with patch("pathlib.Path.is_file", side_effect=PermissionError(13, "denied")):
        assert legacy.load() is None


def test_modern_tier_with_corrupt_catalog_index(modern, catalog):
    modern.save("before corruption")
    catalog.close()
    catalog.db_path.write_text("{not json")

    assert modern.load() is None
    assert modern.save("after corruption") is False
