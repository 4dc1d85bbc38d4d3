import pytest

from starbytes.objects import (
    ClassObject,
    Compare,
    FuncRef,
    Num,
    NumType,
    compare_strings,
    make_class,
)


def test_compare_notequal_combines_less_and_greater():
    less = compare_strings("a", "b")
    greater = compare_strings("b", "a")
    assert less | greater == Compare.NOTEQUAL
    assert int(less | greater) == 0x03


def test_num_int_coerces_value():
    n = Num(NumType.INT, 7.9)
    assert n.value == 7
    assert isinstance(n.value, int)


def test_num_add_then_sub_restores_value():
    a = Num(NumType.INT, 10)
    b = Num(NumType.INT, 4)
    assert a.add(b).sub(b) == a


def test_num_mixed_addition_is_float():
    a = Num(NumType.INT, 1)
    b = Num(NumType.FLOAT, 0.5)
    result = a.add(b)
    assert result.kind is NumType.FLOAT
    assert result.value == pytest.approx(1.5)


def test_num_int_addition_stays_int():
    a = Num(NumType.INT, 2)
    result = a.add(a)
    assert result.kind is NumType.INT


def test_convert_to_int_truncates():
    n = Num(NumType.FLOAT, 3.75).convert_to(NumType.INT)
    assert n == Num(NumType.INT, 3)


def test_convert_round_trip_int():
    n = Num(NumType.INT, 12)
    assert n.convert_to(NumType.FLOAT).convert_to(NumType.INT) == n


@pytest.mark.parametrize(
    "lhs,rhs,expected",
    [(1, 2, Compare.LESS), (2, 2, Compare.EQUAL), (3, 2, Compare.GREATER)],
)
def test_num_compare(lhs, rhs, expected):
    assert Num(NumType.INT, lhs).compare(Num(NumType.INT, rhs)) is expected


@pytest.mark.parametrize(
    "lhs,rhs,expected",
    [("a", "b", Compare.LESS), ("abc", "abc", Compare.EQUAL), ("b", "a", Compare.GREATER)],
)
def test_compare_strings(lhs, rhs, expected):
    assert compare_strings(lhs, rhs) is expected


def test_make_class_gives_distinct_ids():
    first = make_class("Point")
    second = make_class("Point")
    assert first.name == "Point"
    assert first.id != second.id
    assert first != second


def test_class_object_properties():
    obj = ClassObject(make_class("Point"))
    obj.add_property("x", Num(NumType.INT, 1))
    assert obj.get_property("x") == Num(NumType.INT, 1)
    assert obj.get_property("y") is None


def test_class_object_property_name_too_long():
    obj = ClassObject(make_class("Point"))
    with pytest.raises(ValueError):
        obj.add_property("n" * 100, 1)


def test_func_ref_holds_template():
    template = object()
    assert FuncRef(template).template is template