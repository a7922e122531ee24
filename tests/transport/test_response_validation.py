"""Tests for the exchange error-array validation"""

import pytest

from buzzex.core.exceptions import RemoteError, UnknownRemoteError
from buzzex.transport.http import extract_error_codes, validate_response


class TestValidateResponse:
    """Generic error-array handling"""

    def test_empty_error_list_passes(self):
        response = {"error": [], "result": {"pair": "btc_usdt"}}
        assert validate_response(response) is response

    def test_missing_error_field_passes(self):
        response = {"success": 1}
        assert validate_response(response) is response

    def test_non_dict_response_passes(self):
        assert validate_response([1, 2, 3]) == [1, 2, 3]

    def test_hard_error_strips_marker(self):
        with pytest.raises(RemoteError) as exc_info:
            validate_response({"error": ["EGeneral:Invalid"]})

        assert exc_info.value.codes == ["General:Invalid"]
        assert not isinstance(exc_info.value, UnknownRemoteError)

    def test_informational_entries_ignored_when_hard_error_present(self):
        with pytest.raises(RemoteError) as exc_info:
            validate_response({"error": ["WGeneral:Notice", "EOrder:Rejected", "EAPI:Invalid nonce"]})

        assert exc_info.value.codes == ["Order:Rejected", "API:Invalid nonce"]
        assert str(exc_info.value) == "Order:Rejected, API:Invalid nonce"

    def test_unmarked_errors_are_unknown(self):
        with pytest.raises(UnknownRemoteError) as exc_info:
            validate_response({"error": ["Warning:Foo"]})

        assert exc_info.value.errors == ["Warning:Foo"]
        assert exc_info.value.codes == []

    def test_string_error_is_treated_as_list(self):
        with pytest.raises(RemoteError) as exc_info:
            validate_response({"error": "EService:Unavailable"})

        assert exc_info.value.codes == ["Service:Unavailable"]

    def test_extract_error_codes_skips_non_strings(self):
        assert extract_error_codes(["EA", 3, None, "B", "EC:D"]) == ["A", "C:D"]

    @pytest.mark.parametrize("errors", [1, True, {"code": "EGeneral:Invalid"}])
    def test_unreadable_error_field_is_unknown(self, errors):
        with pytest.raises(UnknownRemoteError) as exc_info:
            validate_response({"error": errors})

        assert exc_info.value.errors == [errors]
        assert exc_info.value.codes == []
