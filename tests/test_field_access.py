import pytest

from mirrah import (
    FieldAccessError,
    FieldNotFoundError,
    Reflection,
    ReflectionSettings,
    get_declared_field,
    get_value_from_field,
    set_value_on_field,
)
from deferred_vehicles import build_box
from vehicles import (
    AspirationType,
    Car,
    Driver,
    Engine,
    Garage,
    Motorcycle,
    Point,
    Safe,
    Token,
    build_car,
)


def test_sets_value_on_field():
    car = Car()

    set_value_on_field("wheels", 4, car)

    assert car.wheels == 4


def test_gets_value_from_field():
    car = Car()
    car.wheels = 4

    assert get_value_from_field("wheels", car) == 4


def test_round_trip_through_descriptor():
    car = Car()
    doors = get_declared_field(Car, "doors")

    set_value_on_field(doors, "4", car)

    assert get_value_from_field(doors, car) == "4"


def test_reads_class_level_default():
    assert get_value_from_field("wheels", Car()) == 0


def test_get_value_from_non_existent_field_raises():
    with pytest.raises(FieldNotFoundError):
        get_value_from_field("wings", Car())


def test_set_value_on_non_existent_field_raises():
    with pytest.raises(FieldNotFoundError, match="wings"):
        set_value_on_field("wings", 2, Car())


def test_gets_value_from_field_recursively():
    car = build_car()

    assert get_value_from_field("engine.aspiration.type", car) is AspirationType.NATURAL
    assert get_value_from_field("engine.cylinders", car) == 8


def test_dotted_path_equals_chained_reads():
    car = build_car()

    chained = get_value_from_field(
        "type", get_value_from_field("aspiration", get_value_from_field("engine", car))
    )

    assert get_value_from_field("engine.aspiration.type", car) is chained


def test_recursive_read_raises_if_field_does_not_exist():
    car = Car()
    car.engine = Engine()

    with pytest.raises(FieldNotFoundError) as exc:
        get_value_from_field("engine.foo", car)

    assert exc.value.details["field"] == "foo"
    assert exc.value.details["type"] == "Engine"
    assert exc.value.details["path"] == "engine.foo"


def test_recursive_read_through_none_raises_field_not_found():
    with pytest.raises(FieldNotFoundError):
        get_value_from_field("engine.cylinders", Car())


def test_private_fields_are_accessible_by_default():
    garage = Garage()

    set_value_on_field("_capacity", 3, garage)

    assert get_value_from_field("_capacity", garage) == 3


def test_mangled_fields_are_accessible_by_source_name():
    safe = Safe()

    assert get_value_from_field("__combination", safe) == "1234"
    set_value_on_field("__combination", "0000", safe)
    assert get_value_from_field("__combination", safe) == "0000"


def test_private_fields_rejected_without_force_access():
    reflection = Reflection(ReflectionSettings(force_access=False))
    garage = Garage()

    with pytest.raises(FieldAccessError, match="force_access"):
        reflection.get_value_from_field("_capacity", garage)
    with pytest.raises(FieldAccessError):
        reflection.set_value_on_field("_capacity", 5, garage)

    assert garage._capacity == 2
    assert reflection.get_value_from_field("wheels", Car()) == 0


def test_unassigned_slot_read_raises_field_access_error():
    with pytest.raises(FieldAccessError) as exc:
        get_value_from_field("value", Token())

    assert isinstance(exc.value.__cause__, AttributeError)


def test_slot_round_trip():
    token = Token()

    set_value_on_field("__secret", "s3cr3t", token)

    assert get_value_from_field("__secret", token) == "s3cr3t"


def test_frozen_dataclass_rejects_write():
    point = Point()

    with pytest.raises(FieldAccessError):
        set_value_on_field("x", 1, point)

    assert point.x == 0


def test_frozen_pydantic_model_rejects_write():
    class FrozenDriver(Driver, frozen=True):
        pass

    with pytest.raises(FieldAccessError):
        set_value_on_field("name", "kim", FrozenDriver())


def test_pydantic_model_fields_round_trip():
    driver = Driver()

    set_value_on_field("licensed", True, driver)

    assert get_value_from_field("licensed", driver) is True


def test_descriptor_from_unrelated_class_rejected():
    cc = get_declared_field(Motorcycle, "cc")

    with pytest.raises(FieldAccessError):
        set_value_on_field(cc, "250", Car())


def test_validate_assignment_rejects_mismatched_type():
    reflection = Reflection(ReflectionSettings(validate_assignment=True))
    car = Car()

    with pytest.raises(FieldAccessError, match="rejected"):
        reflection.set_value_on_field("wheels", "four", car)

    reflection.set_value_on_field("wheels", 4, car)
    reflection.set_value_on_field("engine", Engine(), car)

    assert car.wheels == 4
    assert isinstance(car.engine, Engine)


def test_custom_path_separator():
    reflection = Reflection(ReflectionSettings(path_separator="/"))

    assert reflection.get_value_from_field("engine/cylinders", build_car()) == 8


def test_validate_assignment_uses_evaluated_type_next_to_unresolvable_one():
    reflection = Reflection(ReflectionSettings(validate_assignment=True))
    box = build_box()()

    with pytest.raises(FieldAccessError, match="rejected"):
        reflection.set_value_on_field("wheels", "four", box)

    reflection.set_value_on_field("part", object(), box)
