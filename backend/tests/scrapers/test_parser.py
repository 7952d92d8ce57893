"""Unit tests for the ITEC response parsers."""

from courtscout.schemas.availability import CourtSlot
from courtscout.scrapers.parser import (
    extract_authenticity_token,
    extract_html,
    extract_session_id,
    filter_half_hour_slots,
    is_login_redirect,
    is_no_courts_available,
    parse_availability,
    parse_court_slots,
    parse_suggested_times,
    parse_time_slots,
)


def court_row(court_number: int, court_id: int, start: str, end: str) -> str:
    """One court row as it appears inside the escaped jQuery payload."""
    start_q = start.replace(":", "%3A")
    end_q = end.replace(":", "%3A")
    return (
        rf"<tr><td>מגרש: {court_number}<\/td><td><span>1 שעה<\/span><\/td>"
        rf"<td><a href=\"\/self_services\/court_invitation?court_id={court_id}"
        rf"&amp;duration=1.0&amp;end_time={end_q}&amp;start_time={start_q}\">הזמנה<\/a><\/td><\/tr>\n"
    )


def wrap(payload: str) -> str:
    return f"jQuery('#step-2').html('{payload}');"


SUCCESS_BANNER = r"<div class=\"alert alert-success\">נמצאו מגרשים פנויים<\/div>\n"
NO_COURTS_BANNER = r"<div class=\"alert alert-danger\">אין מגרשים פנויים, נסה מועד אחר<\/div>\n"


# ---------------------------------------------------------------------------
# extract_html
# ---------------------------------------------------------------------------


class TestExtractHtml:
    def test_unescapes_payload(self) -> None:
        raw = wrap(r"<div class=\"a\">x<\/div>\n<p>y<\/p>")
        assert extract_html(raw) == '<div class="a">x</div><p>y</p>'

    def test_returns_empty_string_without_jquery_wrapper(self) -> None:
        assert extract_html("<html><body>Maintenance</body></html>") == ""

    def test_spans_multiple_lines(self) -> None:
        raw = "jQuery('#step-2').html('<p>one</p>\n<p>two</p>');"
        assert extract_html(raw) == "<p>one</p>\n<p>two</p>"


# ---------------------------------------------------------------------------
# classification
# ---------------------------------------------------------------------------


class TestIsNoCourtsAvailable:
    def test_danger_alert_means_no_courts(self) -> None:
        assert is_no_courts_available('<div class="alert alert-danger"></div>')

    def test_try_another_time_text_means_no_courts(self) -> None:
        assert is_no_courts_available("<p>נסה מועד אחר</p>")

    def test_other_times_text_means_no_courts(self) -> None:
        assert is_no_courts_available("<p>מועדים אחרים</p>")

    def test_success_marker_wins_over_failure_markers(self) -> None:
        html = '<div class="alert-success"></div><div class="alert-danger">נסה מועד אחר</div>'
        assert not is_no_courts_available(html)

    def test_no_markers_is_not_no_courts(self) -> None:
        assert not is_no_courts_available("<p>hello</p>")


# ---------------------------------------------------------------------------
# parse_court_slots / parse_suggested_times
# ---------------------------------------------------------------------------


class TestParseCourtSlots:
    def test_parses_single_slot(self) -> None:
        html = extract_html(wrap(SUCCESS_BANNER + court_row(3, 101, "08:00", "09:00")))
        assert parse_court_slots(html) == [
            CourtSlot(court_number=3, court_id=101, duration=1.0, start_time="08:00", end_time="09:00")
        ]

    def test_decodes_plus_as_space(self) -> None:
        html = (
            "מגרש: 4 <a href=\"/x?court_id=7&amp;duration=1.5"
            "&amp;end_time=04%2F12%2F2024+09%3A30&amp;start_time=04%2F12%2F2024+08%3A00\">"
        )
        slot = parse_court_slots(html)[0]
        assert slot.start_time == "04/12/2024 08:00"
        assert slot.end_time == "04/12/2024 09:30"
        assert slot.duration == 1.5

    def test_returns_empty_list_without_court_rows(self) -> None:
        assert parse_court_slots("<div>nothing here</div>") == []


class TestParseSuggestedTimes:
    def test_keeps_start_times_in_first_seen_order(self) -> None:
        html = "<h3>12:00-13:00</h3><h3>10:00-11:00</h3><h3>12:00-13:00</h3>"
        assert parse_suggested_times(html) == ["12:00", "10:00"]

    def test_ignores_other_headings(self) -> None:
        assert parse_suggested_times("<h3>תוצאות</h3><h2>10:00-11:00</h2>") == []


# ---------------------------------------------------------------------------
# parse_availability
# ---------------------------------------------------------------------------


class TestParseAvailability:
    def test_available_court(self) -> None:
        raw = wrap(SUCCESS_BANNER + court_row(3, 101, "08:00", "09:00"))
        result = parse_availability(raw)
        assert result.to_json_dict() == {
            "status": "available",
            "courts": [3],
            "slots": [
                {
                    "courtNumber": 3,
                    "courtId": 101,
                    "duration": 1.0,
                    "startTime": "08:00",
                    "endTime": "09:00",
                }
            ],
        }

    def test_no_courts_with_suggested_time(self) -> None:
        raw = wrap(NO_COURTS_BANNER + r"<h3>10:00-11:00<\/h3>")
        assert parse_availability(raw).to_json_dict() == {
            "status": "no-courts",
            "courts": [],
            "slots": [],
            "suggestedTimes": ["10:00"],
        }

    def test_no_courts_without_suggestions_omits_field(self) -> None:
        result = parse_availability(wrap(NO_COURTS_BANNER))
        assert result.status == "no-courts"
        assert result.suggested_times is None
        assert "suggestedTimes" not in result.to_json_dict()

    def test_courts_sorted_numerically_and_deduplicated(self) -> None:
        raw = wrap(
            SUCCESS_BANNER
            + court_row(10, 110, "08:00", "09:00")
            + court_row(9, 109, "08:00", "09:00")
            + court_row(10, 111, "08:30", "09:30")
        )
        result = parse_availability(raw)
        assert result.courts == [9, 10]
        assert len(result.slots) == 3
        assert result.courts == sorted({s.court_number for s in result.slots})

    def test_success_marker_and_failure_marker_yields_available(self) -> None:
        raw = wrap(SUCCESS_BANNER + NO_COURTS_BANNER + court_row(2, 102, "18:00", "19:00"))
        assert parse_availability(raw).status == "available"

    def test_success_marker_without_rows_downgrades_to_no_courts(self) -> None:
        result = parse_availability(wrap(SUCCESS_BANNER))
        assert result.to_json_dict() == {"status": "no-courts", "courts": [], "slots": []}

    def test_missing_wrapper_yields_no_courts(self) -> None:
        result = parse_availability("Internal Server Error")
        assert result.status == "no-courts"
        assert result.courts == []
        assert result.slots == []

    def test_never_raises_on_bad_input(self) -> None:
        result = parse_availability(None)  # type: ignore[arg-type]
        assert result.status == "no-courts"

    def test_is_pure(self) -> None:
        raw = wrap(SUCCESS_BANNER + court_row(5, 105, "20:00", "21:00"))
        assert parse_availability(raw) == parse_availability(raw)


# ---------------------------------------------------------------------------
# time slots
# ---------------------------------------------------------------------------


class TestParseTimeSlots:
    def test_parses_double_escaped_options(self) -> None:
        raw = (
            r"jQuery('#search_start_hour').html('<option value=\"08:00\">08:00<\/option>"
            r"<option value=\"09:00\">09:00<\/option>');"
        )
        assert parse_time_slots(raw) == ["08:00", "09:00"]

    def test_first_matching_pattern_wins(self) -> None:
        raw = r'<option value=\"08:00\"></option><option value="10:00"></option>'
        assert parse_time_slots(raw) == ["08:00"]

    def test_parses_single_quoted_options(self) -> None:
        raw = "<option value='07:00'></option><option value='07:30'></option>"
        assert parse_time_slots(raw) == ["07:00", "07:30"]

    def test_deduplicates(self) -> None:
        raw = '<option value="08:00"></option><option value="08:00"></option>'
        assert parse_time_slots(raw) == ["08:00"]

    def test_suppresses_redundant_half_hours(self) -> None:
        raw = "".join(f'<option value="{t}"></option>' for t in ["08:00", "08:30", "09:00"])
        assert parse_time_slots(raw) == ["08:00", "09:00"]

    def test_returns_empty_list_for_unrelated_body(self) -> None:
        assert parse_time_slots("<p>no options</p>") == []


class TestFilterHalfHourSlots:
    def test_drops_half_hour_when_next_full_hour_present(self) -> None:
        assert filter_half_hour_slots(["08:00", "08:30", "09:00"]) == ["08:00", "09:00"]

    def test_keeps_half_hour_when_next_full_hour_missing(self) -> None:
        assert filter_half_hour_slots(["08:00", "08:30"]) == ["08:00", "08:30"]

    def test_keeps_last_half_hour_of_day(self) -> None:
        assert filter_half_hour_slots(["21:00", "21:30"]) == ["21:00", "21:30"]

    def test_drops_quarter_hours(self) -> None:
        assert filter_half_hour_slots(["08:00", "08:15", "08:45", "10:30"]) == ["08:00", "10:30"]

    def test_parse_time_slots_drops_quarter_hours(self) -> None:
        raw = 'value="08:00" value="08:15" value="08:30" value="09:00"'
        assert parse_time_slots(raw) == ["08:00", "09:00"]


# ---------------------------------------------------------------------------
# tokens and session helpers
# ---------------------------------------------------------------------------


class TestTokenHelpers:
    def test_extracts_authenticity_token(self) -> None:
        html = '<input type="hidden" name="authenticity_token" value="Ab+c/d==" />'
        assert extract_authenticity_token(html) == "Ab+c/d=="

    def test_returns_none_without_token(self) -> None:
        assert extract_authenticity_token("<form></form>") is None

    def test_extracts_session_id(self) -> None:
        assert extract_session_id("_session_id=abc123; path=/; HttpOnly") == "abc123"

    def test_session_id_none_for_missing_header(self) -> None:
        assert extract_session_id(None) is None
        assert extract_session_id("other=1; path=/") is None

    def test_detects_login_redirect_script(self) -> None:
        assert is_login_redirect("window.location = '/self_services/login';")
        assert is_login_redirect('window.location.href = "https://center.tennis.org.il/self_services/login";')

    def test_ignores_unrelated_scripts(self) -> None:
        assert not is_login_redirect("jQuery('#step-2').html('<p></p>');")
