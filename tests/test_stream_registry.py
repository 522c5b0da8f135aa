"""Tests for the stream registry and definitions file loading."""

import pytest

from rtsp_proxy.exceptions import (
    DefinitionsFileError,
    DefinitionsFileNotFound,
    DefinitionsFileUnreadable,
    DuplicateStreamName,
    InvalidSourceURL,
    MalformedDefinition,
    ReservedName,
)
from rtsp_proxy.models import GlobalConfig, StreamDefinition
from rtsp_proxy.services import StreamRegistry, build_registry


class TestInsert:
    """Uniqueness and ordering."""

    def test_duplicate_name_rejected(self):
        registry = StreamRegistry()
        registry.insert(StreamDefinition("cam", "rtsp://a/1"))
        with pytest.raises(DuplicateStreamName):
            registry.insert(StreamDefinition("cam", "rtsp://a/2"))
        assert registry.get("cam").url == "rtsp://a/1"

    def test_duplicate_rejected_in_either_order(self):
        first = StreamDefinition("cam", "rtsp://a/1")
        second = StreamDefinition("cam", "rtsp://b/2", "u", "p")
        for ordering in ((first, second), (second, first)):
            registry = StreamRegistry()
            registry.insert(ordering[0])
            with pytest.raises(DuplicateStreamName):
                registry.insert(ordering[1])
            assert len(registry) == 1

    def test_iteration_sorted_by_name(self):
        registry = StreamRegistry()
        for name in ("zulu", "alpha", "mike"):
            registry.insert(StreamDefinition(name, f"rtsp://h/{name}"))
        assert [d.name for d in registry] == ["alpha", "mike", "zulu"]
        assert registry.names() == ["alpha", "mike", "zulu"]
        assert "mike" in registry


class TestCliUrls:
    """Name synthesis for command line urls."""

    def test_single_url(self):
        registry = StreamRegistry()
        registry.add_cli_urls(["rtsp://a/1"])
        assert registry.names() == ["proxyStream"]
        assert registry.get("proxyStream").url == "rtsp://a/1"

    def test_multiple_urls(self):
        registry = StreamRegistry()
        registry.add_cli_urls(["rtsp://a/1", "rtsp://a/2"])
        assert registry.names() == ["proxyStream-1", "proxyStream-2"]
        assert registry.get("proxyStream-2").url == "rtsp://a/2"

    def test_no_credentials_on_synthesized_entries(self):
        registry = StreamRegistry()
        registry.add_cli_urls(["rtsp://a/1"])
        assert registry.get("proxyStream").username is None


class TestLoadFromFile:
    """Plain text and YAML definitions files."""

    def test_loads_every_line(self, write_definitions):
        path = write_definitions("foo rtsp://x/y\nbar rtsp://x/z carol caroLpass\n")
        registry = StreamRegistry()
        loaded = registry.load_from_file(path)
        assert [d.name for d in loaded] == ["foo", "bar"]
        assert registry.names() == ["bar", "foo"]
        assert registry.get("bar").username == "carol"

    def test_missing_file(self, tmp_path):
        with pytest.raises(DefinitionsFileNotFound):
            StreamRegistry().load_from_file(str(tmp_path / "nope.txt"))

    def test_directory_is_unreadable(self, tmp_path):
        with pytest.raises(DefinitionsFileUnreadable):
            StreamRegistry().load_from_file(str(tmp_path))

    def test_blank_line_aborts(self, write_definitions):
        path = write_definitions("foo rtsp://x/y\n\nbar rtsp://x/z\n")
        registry = StreamRegistry()
        with pytest.raises(MalformedDefinition):
            registry.load_from_file(path)
        assert len(registry) == 0

    def test_bad_url_aborts_whole_file(self, write_definitions):
        path = write_definitions("good rtsp://x/y\nother http://x\n")
        registry = StreamRegistry()
        with pytest.raises(InvalidSourceURL):
            registry.load_from_file(path)
        assert len(registry) == 0

    def test_reserved_name_in_file(self, write_definitions):
        path = write_definitions("good rtsp://x/y\nproxyStream-custom http://x\n")
        registry = StreamRegistry()
        with pytest.raises(ReservedName):
            registry.load_from_file(path)
        assert "good" not in registry

    def test_duplicate_within_file(self, write_definitions):
        path = write_definitions("cam rtsp://x/1\ncam rtsp://x/2\n")
        registry = StreamRegistry()
        with pytest.raises(DuplicateStreamName):
            registry.load_from_file(path)
        assert len(registry) == 0

    def test_duplicate_against_existing_entry(self, write_definitions):
        path = write_definitions("new rtsp://x/1\ncam rtsp://x/2\n")
        registry = StreamRegistry()
        registry.insert(StreamDefinition("cam", "rtsp://a/1"))
        with pytest.raises(DuplicateStreamName):
            registry.load_from_file(path)
        assert registry.names() == ["cam"]

    def test_yaml_file(self, write_definitions):
        path = write_definitions(
            "- name: foo\n"
            "  url: rtsp://x/y\n"
            "- name: bar\n"
            "  url: rtsp://x/z\n"
            "  username: carol\n"
            "  password: 1234\n",
            filename="streams.yaml",
        )
        registry = StreamRegistry()
        registry.load_from_file(path)
        assert registry.names() == ["bar", "foo"]
        assert registry.get("bar").password == "1234"
        assert registry.get("foo").username is None

    def test_yaml_streams_key(self, write_definitions):
        path = write_definitions("streams:\n  - {name: foo, url: 'rtsp://x/y'}\n", filename="streams.yml")
        registry = StreamRegistry()
        registry.load_from_file(path)
        assert registry.names() == ["foo"]

    def test_yaml_entry_without_url(self, write_definitions):
        path = write_definitions("- name: foo\n", filename="streams.yaml")
        with pytest.raises(MalformedDefinition):
            StreamRegistry().load_from_file(path)

    def test_yaml_bad_url(self, write_definitions):
        path = write_definitions("- {name: foo, url: 'http://x'}\n", filename="streams.yaml")
        with pytest.raises(InvalidSourceURL):
            StreamRegistry().load_from_file(path)

    def test_yaml_not_a_list(self, write_definitions):
        path = write_definitions("just a string\n", filename="streams.yaml")
        with pytest.raises(DefinitionsFileUnreadable):
            StreamRegistry().load_from_file(path)

    def test_invalid_yaml(self, write_definitions):
        path = write_definitions("- name: [unclosed\n", filename="streams.yaml")
        with pytest.raises(DefinitionsFileUnreadable):
            StreamRegistry().load_from_file(path)

    @pytest.mark.parametrize("content", [
        "cams:\n  - {name: foo, url: 'rtsp://x/y'}\n",
        "streams:\n",
        "streams: foo\n",
    ])
    def test_yaml_mapping_without_streams_list(self, write_definitions, content):
        path = write_definitions(content, filename="streams.yaml")
        registry = StreamRegistry()
        with pytest.raises(DefinitionsFileUnreadable):
            registry.load_from_file(path)
        assert len(registry) == 0

    def test_yaml_empty_credentials_inherit(self, write_definitions):
        path = write_definitions(
            "- {name: foo, url: 'rtsp://x/y', username: '', password: ''}\n",
            filename="streams.yaml",
        )
        registry = StreamRegistry()
        registry.load_from_file(path)
        assert registry.get("foo").username is None
        assert registry.get("foo").password is None

    def test_path_too_long(self, tmp_path):
        with pytest.raises(DefinitionsFileError):
            StreamRegistry().load_from_file(str(tmp_path / ("a" * 5000)))

    def test_existence_check_error_is_unreadable(self, tmp_path, monkeypatch):
        def _denied(self):
            raise PermissionError(13, "Permission denied")
        monkeypatch.setattr("pathlib.Path.exists", _denied)
        with pytest.raises(DefinitionsFileUnreadable) as exc_info:
            StreamRegistry().load_from_file(str(tmp_path / "streams.txt"))
        assert "Permission denied" in exc_info.value.message


class TestBuildRegistry:
    """Combining command line urls with a definitions file."""

    def test_cli_and_file(self, write_definitions):
        path = write_definitions("foo rtsp://x/y\n")
        config = GlobalConfig(source_urls=("rtsp://a/1", "rtsp://a/2"), definitions_file=path)
        registry = build_registry(config)
        assert registry.names() == ["foo", "proxyStream-1", "proxyStream-2"]

    def test_no_file(self):
        registry = build_registry(GlobalConfig(source_urls=("rtsp://a/1",)))
        assert registry.names() == ["proxyStream"]

    def test_empty(self):
        assert len(build_registry(GlobalConfig(register_proxying=True))) == 0
