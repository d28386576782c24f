import os

import pytest

from thumbs.errors import EnumerationError
from thumbs.helpers import derive_output_name, glob_sources, is_derived, list_images, split_ext


@pytest.mark.parametrize("src, expected", [
    ("pic.jpg", "pic_thumb.jpg"),
    ("a.b.jpeg", "a.b_thumb.jpeg"),
    ("noext", "noext_thumb"),
    ("./pictures/green1.jpg", "./pictures/green1_thumb.jpg"),
    ("some.dir/noext", "some.dir/noext_thumb"),
    (".hidden", "_thumb.hidden"),
    ("dir/.hidden", "dir/_thumb.hidden"),
])
def test_derive_output_name(src, expected):
    assert derive_output_name(src) == expected


def test_derive_custom_marker():
    assert derive_output_name("pic.png", marker="-small") == "pic-small.png"


def test_derive_injective_over_distinct_stems():
    sources = ["a.jpg", "b.jpg", "a.b.jpg", "a_b.jpg", "dir/a.jpg", "A.jpg"]
    derived = [derive_output_name(s) for s in sources]
    assert len(set(derived)) == len(sources)


def test_split_ext():
    assert split_ext("x/y.tar.gz") == ("x/y.tar", ".gz")
    assert split_ext("trailingdot.") == ("trailingdot", ".")


def test_is_derived():
    assert is_derived("pic_thumb.jpg")
    assert not is_derived("pic.jpg")


def test_list_images_sorted_and_filtered(make_image, tmp_path):
    make_image("b.jpg")
    os.rename(make_image("a.png"), tmp_path / "a.PNG")
    make_image("a_thumb.jpg")
    (tmp_path / "notes.txt").write_text("hi")
    (tmp_path / "sub.jpg").mkdir()

    found = [os.path.basename(p) for p in list_images(tmp_path)]
    assert found == ["a.PNG", "b.jpg"]

    with_thumbs = [os.path.basename(p) for p in list_images(tmp_path, include_thumbs=True)]
    assert with_thumbs == ["a.PNG", "a_thumb.jpg", "b.jpg"]


def test_list_images_missing_dir(tmp_path):
    with pytest.raises(EnumerationError) as exc:
        list_images(tmp_path / "nope")
    assert exc.value.identifier.endswith("nope")


def test_glob_sources(make_image, tmp_path):
    make_image("one.jpg")
    make_image("two.jpg")
    make_image("three.png")
    found = [os.path.basename(p) for p in glob_sources(str(tmp_path / "*.jpg"))]
    assert found == ["one.jpg", "two.jpg"]
