import pytest

from propease.core.errors import InvalidInput
from propease.core.validation import check, check_fields, check_percentage_total, is_valid, require


@pytest.mark.parametrize(
    "kind,value",
    [
        ("email", "rajesh@example.com"),
        ("phone", "9876543210"),
        ("pan", "ABCDE1234F"),
        ("aadhar", "123456789012"),
        ("maharera", "P52100012345"),
        ("ifsc", "HDFC0001234"),
    ],
)
def test_valid_values(kind, value):
    assert is_valid(kind, value)


@pytest.mark.parametrize(
    "kind,value,message",
    [
        ("email", "rajesh@example", "Invalid email format"),
        ("phone", "98765", "Mobile number must be 10 digits"),
        ("pan", "abcde1234f", "Invalid PAN format"),
        ("aadhar", "12345678901", "Invalid Aadhar format"),
        ("maharera", "52100012345", "Invalid Maharera number format"),
        ("ifsc", "HDFC1001234", "Invalid IFSC code"),
    ],
)
def test_invalid_values_raise_field_message(kind, value, message):
    with pytest.raises(InvalidInput) as exc:
        check(kind, value)
    assert str(exc.value) == message


def test_optional_fields_skip_blank_values():
    check("pan", "", optional=True)
    check("aadhar", None, optional=True)
    with pytest.raises(InvalidInput):
        check("pan", "BAD", optional=True)


def test_require_uses_caller_message():
    with pytest.raises(InvalidInput) as exc:
        require({"client_name": "  "}, ("client_name",), "Please fill all required client fields")
    assert str(exc.value) == "Please fill all required client fields"


def test_check_fields_validates_each_kind():
    check_fields(
        {"email": "a@b.co", "mobile_number": "9876543210", "pan_no": None},
        {"email": "email", "mobile_number": "phone", "pan_no": "pan"},
        optional=("pan_no",),
    )
    with pytest.raises(InvalidInput) as exc:
        check_fields({"email": "a@b.co", "mobile_number": "123"}, {"email": "email", "mobile_number": "phone"})
    assert str(exc.value) == "Mobile number must be 10 digits"


def test_percentage_total():
    assert check_percentage_total([10, "20.5", 69.5], exact=True) == 100
    check_percentage_total([40, 30], exact=False)
    with pytest.raises(InvalidInput, match="cannot exceed 100%"):
        check_percentage_total([60, 50], exact=False)
    with pytest.raises(InvalidInput, match="must equal 100%"):
        check_percentage_total([60, 30], exact=True)
