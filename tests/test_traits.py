from drillrunner.solutions.traits import (
    Cons,
    Cow,
    Nil,
    OtherSoftware,
    SomeSoftware,
    Wrapper,
    abs_all,
    append_bar,
    compare_license_types,
    create_empty_list,
    create_non_empty_list,
)

import pytest


def test_is_foo_bar():
    assert append_bar("Foo") == "FooBar"


def test_is_bar_bar():
    assert append_bar(append_bar("")) == "BarBar"


def test_is_vec_pop_eq_bar():
    foo = append_bar(["Foo"])
    assert foo.pop() == "Bar"
    assert foo.pop() == "Foo"


def test_append_bar_rejects_other_types():
    with pytest.raises(TypeError):
        append_bar(3)


def test_is_licensing_info_the_same():
    licensing_info = "Some information"
    some_software = SomeSoftware(version_number=1)
    other_software = OtherSoftware(version_number="v2.0.0")
    assert some_software.licensing_info() == licensing_info
    assert other_software.licensing_info() == licensing_info


def test_compare_license_information():
    assert compare_license_types(SomeSoftware(), OtherSoftware()) is True


def test_compare_license_information_backwards():
    assert compare_license_types(OtherSoftware(), SomeSoftware()) is True


def test_store_u32_in_wrapper():
    assert Wrapper(42).value == 42


def test_store_str_in_wrapper():
    assert Wrapper("Foo").value == "Foo"


def test_create_empty_list():
    assert create_empty_list() == Nil()


def test_create_non_empty_list():
    non_empty = create_non_empty_list()
    assert non_empty != create_empty_list()
    assert non_empty == Cons(1, Nil())


def test_cow_no_clone_when_unchanged():
    source = (0, 1, 2)
    cow = abs_all(Cow(source))
    assert cow.owned is False
    assert cow.data is source


def test_cow_clones_when_mutated():
    source = (-1, 0, 1)
    cow = abs_all(Cow(source))
    assert cow.owned is True
    assert list(cow.data) == [1, 0, 1]
    assert source == (-1, 0, 1)


def test_cow_already_owned_mutates_in_place():
    source = [-1, 0, 1]
    cow = abs_all(Cow(source, owned=True))
    assert cow.owned is True
    assert cow.data is source
    assert source == [1, 0, 1]