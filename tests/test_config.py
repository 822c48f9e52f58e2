import io
import json
from decimal import Decimal
from fractions import Fraction

import pytest

from labmath import LinearSystem, Matrix, ScalarType, load_system_from_json
from labmath.config import matrix_from_dict, matrix_to_dict
from labmath.examples import augmentation_example


def test_matrix_dict_keeps_shape_boundary_and_type():
    m = Matrix.from_rows([[Decimal("1.5"), 2], [3, Decimal("-0.25")]], augmented_column=1)
    data = matrix_to_dict(m)
    assert data["scalar_type"] == "decimal"
    assert data["augmented_column"] == 1
    assert data["values"] == ["1.5", "2", "3", "-0.25"]
    json.dumps(data)

    restored = matrix_from_dict(data)
    assert restored == m
    assert restored.scalar_type is ScalarType.DECIMAL
    assert restored.augmented_column == 1


def test_numpy_values_become_plain_numbers():
    m = Matrix(1, 2, [3, -4], scalar_type="int16")
    data = matrix_to_dict(m)
    assert data["values"] == [3, -4]
    assert all(type(value) is int for value in data["values"])
    assert "augmented_column" not in data


def test_matrix_from_rows_and_aliases():
    m = matrix_from_dict({"rows": [[1, 2], [3, 4]], "scalar_type": "double"})
    assert m.scalar_type is ScalarType.FLOAT64
    assert m.to_rows() == [[1.0, 2.0], [3.0, 4.0]]

    fractions = matrix_from_dict({"lines": 1, "columns": 2, "values": ["1/3", 2], "scalar_type": "fraction"})
    assert fractions.values == (Fraction(1, 3), Fraction(2))


def test_missing_scalar_type_defaults_to_float64():
    m = matrix_from_dict({"lines": 1, "columns": 2, "values": [1, 2]})
    assert m.scalar_type is ScalarType.FLOAT64


def test_default_variable_names():
    system = LinearSystem(coefficients=Matrix(2, 3), constants=Matrix(2, 1))
    assert system.variable_names == ["x1", "x2", "x3"]


def test_system_json_round_trip():
    system = augmentation_example()
    system.description = "Three equations"
    text = system.to_json()
    restored = LinearSystem.from_json(io.StringIO(text))
    assert restored.label == "Exercise 88"
    assert restored.description == "Three equations"
    assert restored.variable_names == ["x", "y", "z"]
    assert restored.coefficients == system.coefficients
    assert restored.coefficients.scalar_type is ScalarType.INT16
    assert restored.constants == system.constants
    assert restored.solve() == pytest.approx({"x": 3.0, "y": -1.0, "z": 4.0})


def test_save_and_load(tmp_path):
    path = tmp_path / "system.json"
    augmentation_example().save(path)

    system, solution = load_system_from_json(path)
    assert system.coefficients.shape == (3, 3)
    assert solution == pytest.approx({"x": 3.0, "y": -1.0, "z": 4.0})

    handle = io.StringIO()
    system.save(handle)
    assert json.loads(handle.getvalue())["label"] == "Exercise 88"


def test_load_without_solution(tmp_path):
    path = tmp_path / "singular.json"
    path.write_text(json.dumps({
        "coefficients": {"rows": [[1, 1], [2, 2]], "scalar_type": "int"},
        "constants": [2, 5],
    }), encoding="utf-8")
    system, solution = load_system_from_json(path)
    assert system.variable_names == ["x1", "x2"]
    assert solution is None


def test_top_level_must_be_an_object():
    with pytest.raises(ValueError):
        LinearSystem.from_json(io.StringIO("[1, 2, 3]"))


def test_constants_keep_their_own_type():
    system = LinearSystem(
        coefficients=Matrix.from_rows([[2, 0], [0, 2]]),
        constants=Matrix(2, 1, [0.5, 1.5]),
    )
    before = system.solve()
    assert before == pytest.approx({"x1": 0.25, "x2": 0.75})

    data = json.loads(system.to_json())
    assert data["constants"]["scalar_type"] == "float64"

    restored = LinearSystem.from_dict(data)
    assert restored.coefficients.scalar_type is ScalarType.INT64
    assert restored.constants.scalar_type is ScalarType.FLOAT64
    assert restored.constants.values == (0.5, 1.5)
    assert restored.solve() == pytest.approx(before)


def test_constants_as_plain_list_use_coefficient_type():
    restored = LinearSystem.from_dict({
        "coefficients": {"rows": [[1, 0], [0, 1]], "scalar_type": "fraction"},
        "constants": ["1/2", "3/4"],
    })
    assert restored.constants.values == (Fraction(1, 2), Fraction(3, 4))
