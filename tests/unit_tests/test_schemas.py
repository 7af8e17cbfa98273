from content_files_api.schemas import ContentFileSummary, ErrorNumber, ErrorResponse


def test_error_numbers_are_stable():
    assert {e.name: e.value for e in ErrorNumber} == {
        "EXISTS": 1,
        "TOOLARGE": 2,
        "REQUIRED": 3,
        "NOTFOUND": 4,
        "TOOSMALL": 5,
        "NOTNULL": 6,
        "UNKNOWN": 7,
    }


def test_error_response__serializes_with_camel_case_keys():
    error = ErrorResponse(error_number=ErrorNumber.NOTFOUND, parameter_name="fileName", parameter_value="a.txt")
    assert error.to_json() == {
        "errorNumber": 4,
        "parameterName": "fileName",
        "parameterValue": "a.txt",
        "errorDescription": "The entity could not be found",
    }


def test_error_response__description_depends_only_on_error_number():
    first = ErrorResponse(error_number=ErrorNumber.TOOLARGE, parameter_name="containerName", parameter_value="x" * 80)
    second = ErrorResponse(error_number=ErrorNumber.TOOLARGE)
    assert first.error_description == second.error_description == "The parameter value is too large"


def test_error_response__unknown_has_no_parameter():
    assert ErrorResponse(error_number=ErrorNumber.UNKNOWN).to_json() == {
        "errorNumber": 7,
        "parameterName": None,
        "parameterValue": None,
        "errorDescription": "An unknown error occurred",
    }


def test_error_response__accepts_camel_case_input():
    error = ErrorResponse.model_validate({"errorNumber": 6, "parameterName": "fileData"})
    assert error.error_number == ErrorNumber.NOTNULL
    assert error.error_description == "The parameter cannot be null"


def test_content_file_summary__exposes_name():
    assert ContentFileSummary(name="a.txt").model_dump() == {"name": "a.txt"}
