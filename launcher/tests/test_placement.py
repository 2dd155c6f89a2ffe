"""
Tests for jar placement into Server/{mods,earlyplugins,plugins}.
"""

import pytest

from hytale_launcher.errors import ConfigurationError
from hytale_launcher.models import PlacementRequest, make_request, normalize_bucket
from hytale_launcher.placement import ArtifactPlacer, unique_name


class TestUniqueName:
    def test_free_name_is_kept(self):
        claimed = set()
        assert unique_name("mod.jar", set(), claimed) == "mod.jar"
        assert claimed == {"mod.jar"}

    def test_first_candidate_may_overwrite_previous_run(self):
        assert unique_name("mod.jar", {"mod.jar"}, set()) == "mod.jar"

    def test_claimed_this_run_gets_suffix(self):
        claimed = {"mod.jar"}
        assert unique_name("mod.jar", set(), claimed) == "mod-1.jar"

    def test_suffix_skips_files_on_disk(self):
        claimed = {"mod.jar"}
        assert unique_name("mod.jar", {"mod.jar", "mod-1.jar"}, claimed) == "mod-2.jar"

    def test_suffix_skips_claimed(self):
        claimed = {"mod.jar", "mod-1.jar"}
        assert unique_name("mod.jar", set(), claimed) == "mod-2.jar"

    def test_multi_dot_and_no_extension(self):
        assert unique_name("my.mod.jar", set(), {"my.mod.jar"}) == "my.mod-1.jar"
        assert unique_name("README", set(), {"README"}) == "README-1"


class TestBuckets:
    @pytest.mark.parametrize("raw,expected", [
        ("mods", "mods"), (" /earlyplugins/ ", "earlyplugins"), ("plugins/", "plugins"),
    ])
    def test_normalize(self, raw, expected):
        assert normalize_bucket(raw) == expected

    @pytest.mark.parametrize("raw", ["", "  / ", ".hidden", "config", "../mods"])
    def test_rejects(self, raw):
        with pytest.raises(ConfigurationError):
            normalize_bucket(raw)

    def test_make_request(self, tmp_path):
        req = make_request(tmp_path / "a.jar", "mods/")
        assert isinstance(req, PlacementRequest)
        assert req.bucket == "mods"


@pytest.fixture
def server_dir(tmp_path):
    return tmp_path / "runtime" / "Server"


@pytest.fixture
def placer(server_dir):
    return ArtifactPlacer(lambda bucket: server_dir / bucket)


class TestArtifactPlacer:
    def test_primary_always_placed(self, placer, server_dir, make_jar):
        own = make_jar("build/libs/my-mod.jar", b"own")
        res = placer.place([], (own, "mods"))

        assert res["mods"].files == ["my-mod.jar"]
        assert (server_dir / "mods" / "my-mod.jar").read_bytes() == b"own"
        assert res["earlyplugins"].files == []
        assert (server_dir / "plugins").is_dir()

    def test_primary_ignores_extension_filter(self, placer, server_dir, make_jar):
        own = make_jar("build/my-mod.zip")
        res = placer.place([], (own, "earlyplugins"))
        assert res["earlyplugins"].files == ["my-mod.zip"]

    def test_same_name_twice_in_one_run(self, placer, server_dir, make_jar):
        own = make_jar("self/own.jar")
        a = make_jar("a/mod.jar", b"A")
        b = make_jar("b/mod.jar", b"B")
        res = placer.place([make_request(a, "mods"), make_request(b, "mods")], (own, "mods"))

        assert res["mods"].files == ["own.jar", "mod.jar", "mod-1.jar"]
        assert (server_dir / "mods" / "mod.jar").read_bytes() == b"A"
        assert (server_dir / "mods" / "mod-1.jar").read_bytes() == b"B"

    def test_rerun_overwrites_instead_of_suffixing(self, placer, server_dir, make_jar):
        own = make_jar("self/mod.jar", b"v1")
        placer.place([], (own, "mods"))
        own.write_bytes(b"v2")
        res = placer.place([], (own, "mods"))

        assert res["mods"].files == ["mod.jar"]
        assert sorted(p.name for p in (server_dir / "mods").iterdir()) == ["mod.jar"]
        assert (server_dir / "mods" / "mod.jar").read_bytes() == b"v2"

    def test_suffix_does_not_clobber_old_files(self, placer, server_dir, make_jar):
        (server_dir / "mods").mkdir(parents=True)
        (server_dir / "mods" / "mod-1.jar").write_bytes(b"old")
        own = make_jar("self/mod.jar")
        other = make_jar("other/mod.jar", b"new")
        res = placer.place([make_request(other, "mods")], (own, "mods"))

        assert res["mods"].files == ["mod.jar", "mod-2.jar"]
        assert (server_dir / "mods" / "mod-1.jar").read_bytes() == b"old"

    def test_buckets_are_independent(self, placer, server_dir, make_jar):
        own = make_jar("self/core.jar")
        early = make_jar("early/core.jar")
        plug = make_jar("plug/core.jar")
        res = placer.place(
            [make_request(early, "earlyplugins"), make_request(plug, "plugins")],
            (own, "mods"),
        )
        assert res["mods"].files == ["core.jar"]
        assert res["earlyplugins"].files == ["core.jar"]
        assert res["plugins"].files == ["core.jar"]

    def test_non_jars_and_missing_files_skipped(self, placer, server_dir, make_jar, tmp_path):
        own = make_jar("self/own.jar")
        txt = make_jar("extra/notes.txt")
        res = placer.place(
            [make_request(txt, "mods"), make_request(tmp_path / "gone.jar", "mods")],
            (own, "mods"),
        )
        assert res["mods"].files == ["own.jar"]

    def test_duplicate_requests_collapsed(self, placer, make_jar):
        own = make_jar("self/own.jar")
        extra = make_jar("extra/lib.jar")
        res = placer.place([make_request(extra, "mods"), make_request(extra, "mods")], (own, "mods"))
        assert res["mods"].files == ["own.jar", "lib.jar"]

    def test_primary_listed_again_not_copied_twice(self, placer, make_jar):
        own = make_jar("self/own.jar")
        res = placer.place([make_request(own, "mods")], (own, "mods"))
        assert res["mods"].files == ["own.jar"]

    def test_unknown_bucket_fails_before_copy(self, placer, server_dir, make_jar):
        own = make_jar("self/own.jar")
        good = make_jar("a/good.jar")
        with pytest.raises(ConfigurationError, match="Unsupported directory"):
            placer.place([(good, "mods"), (good, "resourcepacks")], (own, "mods"))
        assert not server_dir.exists()

    def test_missing_primary(self, placer, server_dir, tmp_path):
        with pytest.raises(ConfigurationError, match="Build artifact not found"):
            placer.place([], (tmp_path / "nope.jar", "mods"))
        assert not server_dir.exists()
