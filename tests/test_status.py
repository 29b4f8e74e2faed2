import pytest

from cfasm.status import AssemblyError, AssemblyStatus


@pytest.mark.parametrize(
    "status, text",
    [
        (AssemblyStatus.OK, "ok"),
        (AssemblyStatus.TOO_LONG_LABEL, "label is too long"),
        (AssemblyStatus.EMPTY_LABEL, "label is empty"),
        (AssemblyStatus.INVALID_PUSHPOP_ARGUMENT, "invalid pushpop argument"),
        (AssemblyStatus.UNEXPECTED_CHARACTERS, "unexpected characters"),
    ],
)
def test_status_strings(status, text):
    assert str(status) == text


def test_every_status_has_a_description():
    descriptions = [AssemblyStatus.__str__(status) for status in AssemblyStatus]
    assert all(descriptions)
    assert "<invalid>" not in descriptions
    assert len(set(descriptions)) == len(list(AssemblyStatus))


@pytest.mark.parametrize("status", list(AssemblyStatus))
def test_error_message_uses_status_description(status):
    error = AssemblyError(status, 1, "x")
    assert str(error).startswith(AssemblyStatus.__str__(status) + " at 1: ")


def test_error_message_format():
    error = AssemblyError(AssemblyStatus.UNKNOWN_TOKEN, 4, "push $")
    assert str(error) == 'unknown token at 4: "push $"'


def test_error_keeps_details():
    error = AssemblyError(AssemblyStatus.UNKNOWN_REGISTER, 7, "push zz")
    assert error.status is AssemblyStatus.UNKNOWN_REGISTER
    assert error.line == 7
    assert error.contents == "push zz"


def test_error_is_raisable():
    error = AssemblyError(AssemblyStatus.INTERNAL_ERROR, 2, "halt")
    with pytest.raises(AssemblyError) as info:
        raise error
    assert info.value is error
    assert info.value.status is AssemblyStatus.INTERNAL_ERROR
    assert str(info.value) == 'internal error at 2: "halt"'