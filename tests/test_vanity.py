"""Tests for the VanityExtractor."""

import os
import sys

import pytest

from govanity.crawler.models import RepoRef
from govanity.errors import CloneError, PackageListError
from govanity.extractors.models import PackageListing
from govanity.extractors.packages import GoListLister
from govanity.extractors.vanity import VanityExtractor, collect_imports, path_depth

TFTP = "https://github.com/vcabbage/go-tftp"
BROKEN = "https://github.com/packag/broken"
AMQP = "https://github.com/packag/amqp"


def test_path_depth(tmp_path):
    (tmp_path / "a" / "b").mkdir(parents=True)
    assert path_depth(tmp_path, tmp_path) == 0
    assert path_depth(tmp_path / "a", tmp_path) == 1
    assert path_depth(tmp_path / "a" / "b", tmp_path) == 2


def test_path_depth_outside_root(tmp_path):
    with pytest.raises(PackageListError):
        path_depth(tmp_path.parent, tmp_path)


def test_extract_filters_by_prefix_and_computes_depth(fake_cloner, fake_lister):
    extractor = VanityExtractor(repo_manager=fake_cloner, lister=fake_lister)

    imports = extractor.extract(RepoRef(clone_url=TFTP), "pack.ag")

    assert {(i.import_path, i.path_depth) for i in imports} == {
        ("pack.ag/tftp", 0),
        ("pack.ag/tftp/netascii", 1),
    }
    assert all(i.repo_url == TFTP for i in imports)
    assert {i.import_prefix for i in imports} == {"pack.ag/tftp"}


def test_nested_internal_package_resolves_to_repo_root(fake_cloner, fake_lister):
    extractor = VanityExtractor(repo_manager=fake_cloner, lister=fake_lister)

    imports = extractor.extract(RepoRef(clone_url=AMQP), "pack.ag")
    testconn = next(i for i in imports if i.import_path.endswith("testconn"))

    assert testconn.path_depth == 2
    assert testconn.import_prefix == "pack.ag/amqp"


def test_working_directory_removed_after_success(fake_cloner, fake_lister):
    extractor = VanityExtractor(repo_manager=fake_cloner, lister=fake_lister)
    extractor.extract(RepoRef(clone_url=TFTP), "pack.ag")

    assert not fake_cloner.cloned_into[0].exists()


def test_working_directory_removed_after_failure(fake_cloner, fake_lister):
    extractor = VanityExtractor(repo_manager=fake_cloner, lister=fake_lister)

    with pytest.raises(CloneError):
        extractor.extract(RepoRef(clone_url=BROKEN), "pack.ag")
    assert not fake_cloner.cloned_into[0].exists()


def test_symlinked_package_directory_is_resolved(fake_lister):
    class LinkingCloner:
        def clone(self, url, dest):
            (dest / "sub" / "pkg").mkdir(parents=True)
            os.symlink(dest / "sub" / "pkg", dest / "link")
            (dest / ".layout").write_text("pack.ag/repo/sub/pkg:link")

    extractor = VanityExtractor(repo_manager=LinkingCloner(), lister=fake_lister)
    imports = extractor.extract(RepoRef(clone_url="https://github.com/a/repo"), "pack.ag")

    assert imports[0].path_depth == 2
    assert imports[0].import_prefix == "pack.ag/repo"


def test_unresolvable_directory_is_a_list_error(fake_cloner):
    class MissingDirLister:
        def list_packages(self, directory):
            return [PackageListing("pack.ag/tftp", str(directory / "gone"))]

    extractor = VanityExtractor(repo_manager=fake_cloner, lister=MissingDirLister())

    with pytest.raises(PackageListError):
        extractor.extract(RepoRef(clone_url=TFTP), "pack.ag")


def test_extract_all_continues_after_failure(fake_cloner, fake_lister):
    extractor = VanityExtractor(repo_manager=fake_cloner, lister=fake_lister)
    repos = [RepoRef(clone_url=TFTP), RepoRef(clone_url=BROKEN), RepoRef(clone_url=AMQP)]

    results = extractor.extract_all(repos, "pack.ag")

    assert [r.success for r in results] == [True, False, True]
    assert "repository not found" in results[1].error
    assert len(collect_imports(results)) == 4


def test_extract_all_with_workers_keeps_order(fake_cloner, fake_lister):
    extractor = VanityExtractor(repo_manager=fake_cloner, lister=fake_lister)
    repos = [RepoRef(clone_url=TFTP), RepoRef(clone_url=BROKEN), RepoRef(clone_url=AMQP)]

    results = extractor.extract_all(repos, "pack.ag", workers=3)

    assert [r.repo.clone_url for r in results] == [TFTP, BROKEN, AMQP]
    assert [r.success for r in results] == [True, False, True]


@pytest.mark.skipif(sys.platform != "linux", reason="needs byte-string file names")
def test_non_utf8_package_directory_does_not_abort(fake_go):
    class ByteNameCloner:
        def clone(self, url, dest):
            os.mkdir(os.fsencode(dest) + b"/\xffdir")

    extractor = VanityExtractor(repo_manager=ByteNameCloner(), lister=GoListLister(go_binary=fake_go))
    result = extractor.extract_one(RepoRef(clone_url="https://github.com/a/x"), "pack.ag")

    assert result.success
    assert [(i.import_path, i.path_depth) for i in result.imports] == [("pack.ag/x", 1)]
