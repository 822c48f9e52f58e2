from fractions import Fraction

import pytest

from labmath import Matrix, ScalarType
from labmath.errors import DimensionMismatchError, IndexOutOfRangeError, NotSquareError
from labmath.examples import augmentation_example, determinant_example, inversion_chain_example


def test_two_by_two():
    m = determinant_example()
    det = m.determinant()
    assert det == -2
    assert ScalarType.of(det) is ScalarType.INT16


def test_three_by_three():
    assert augmentation_example().coefficients.determinant() == -1
    a, b, _, _ = inversion_chain_example()
    assert a.determinant() == -10


def test_one_by_one():
    assert Matrix(1, 1, [7]).determinant() == 7


def test_four_by_four_recursion():
    m = Matrix.from_rows([
        [2, 1, 0, 3],
        [0, 3, 5, 1],
        [0, 0, 1, 4],
        [0, 0, 0, 2],
    ])
    assert m.determinant() == 12
    assert Matrix.identity(4).determinant() == 1


def test_singular_matrix():
    m = Matrix.from_rows([[1, 2, 3], [4, 5, 6], [7, 8, 9]])
    assert m.determinant() == 0


def test_fraction_determinant_is_exact():
    m = Matrix.from_rows([[Fraction(1, 2), Fraction(1, 3)], [Fraction(1, 4), Fraction(1, 5)]])
    assert m.determinant() == Fraction(1, 60)


def test_determinant_requires_square():
    with pytest.raises(NotSquareError):
        Matrix(2, 3).determinant()
    # NotSquareError is a dimension mismatch
    with pytest.raises(DimensionMismatchError):
        Matrix(3, 1).determinant()


def test_minor():
    a, _, _, _ = inversion_chain_example()
    assert a.minor(0, 0).to_rows() == [[5, 7], [0, -1]]
    assert a.minor(1, 2).to_rows() == [[1, 3], [4, 0]]
    assert a.shape == (3, 3)


def test_minor_errors():
    a, _, _, _ = inversion_chain_example()
    with pytest.raises(IndexOutOfRangeError):
        a.minor(3, 0)
    with pytest.raises(DimensionMismatchError):
        a.augment_with_identity().minor(0, 0)


def test_cofactor_expansion_matches_signature():
    a, _, _, _ = inversion_chain_example()
    expansion = sum(
        int(a[0, j]) * Matrix.signature_of(0, j) * int(a.minor(0, j).determinant())
        for j in range(3)
    )
    assert expansion == a.determinant()


@pytest.mark.parametrize("rows, scalar_type", [
    ([[1, 2, 3], [4, 5, 6], [1, 2, 3]], ScalarType.INT64),
    ([[2, -1, 5, 0], [3, 3, 3, 3], [2, -1, 5, 0], [7, 1, 0, 2]], ScalarType.INT16),
    ([[0.5, 1.5], [0.5, 1.5]], ScalarType.FLOAT64),
    ([[Fraction(1, 3), 2, 5], [4, 4, 4], [Fraction(1, 3), 2, 5]], ScalarType.FRACTION),
])
def test_repeated_line_gives_exact_zero(rows, scalar_type):
    m = Matrix.from_rows(rows, scalar_type=scalar_type)
    det = m.determinant()
    assert det == 0
    assert ScalarType.of(det) is scalar_type
