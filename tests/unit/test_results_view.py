"""
Unit tests for the recommendation cards and CSV export.
"""

import io
from unittest.mock import MagicMock

import pandas as pd

from chat_frontend_streamlit.results_view import (
    PEOPLE_URL,
    PROGRAMMES_URL,
    format_program_card,
    format_supervisor_card,
    render_results,
    results_to_csv,
)

PROGRAM = {
    "name": "PhD in Physics",
    "description": "Research-based doctoral program.",
    "url": "https://www.phy.cam.ac.uk/study/postgraduate/phd-physics",
    "supervisors": ["Dr. Suchitra Sebastian", "Professor Richard Friend"],
}
SUPERVISOR = {
    "name": "Dr. Suchitra Sebastian",
    "department": "Cavendish Laboratory",
    "researchArea": "Quantum materials",
    "url": "https://www.phy.cam.ac.uk/people/sebastian",
}


def fake_streamlit():
    st = MagicMock()
    st.tabs.return_value = [MagicMock(), MagicMock()]
    return st


class TestCards:
    def test_program_card(self):
        card = format_program_card(PROGRAM)

        assert "PhD in Physics" in card
        assert "Research-based doctoral program." in card
        assert "- Professor Richard Friend" in card
        assert f"({PROGRAM['url']})" in card

    def test_program_card_skips_missing_fields(self):
        card = format_program_card({"name": "MASt in Physics"})

        assert "Suggested Supervisors" not in card
        assert "Learn more" not in card

    def test_supervisor_card(self):
        card = format_supervisor_card(SUPERVISOR)

        assert "Cavendish Laboratory" in card
        assert "Quantum materials" in card
        assert "View profile" in card

    def test_supervisor_card_accepts_variant_keys(self):
        card = format_supervisor_card(
            {"name": "Prof. Y", "university": "Cambridge", "field": "Astrophysics"}
        )

        assert "Cambridge" in card
        assert "Astrophysics" in card
        assert "View profile" not in card


class TestCsvExport:
    def test_programs_csv(self):
        df = pd.read_csv(io.BytesIO(results_to_csv([PROGRAM], "programs")))

        assert list(df.columns) == ["name", "description", "url", "supervisors"]
        assert df.loc[0, "supervisors"] == "Dr. Suchitra Sebastian; Professor Richard Friend"

    def test_supervisors_csv_fills_missing_columns(self):
        df = pd.read_csv(
            io.BytesIO(results_to_csv([{"name": "Prof. Y", "research": "Optics"}], "supervisors")),
            keep_default_na=False,
        )

        assert list(df.columns) == ["name", "department", "researchArea", "description", "url"]
        assert df.loc[0, "researchArea"] == "Optics"
        assert df.loc[0, "url"] == ""


class TestRenderResults:
    def test_nothing_without_results(self):
        st = fake_streamlit()

        render_results(st, None)

        st.tabs.assert_not_called()

    def test_renders_one_card_per_item(self):
        st = fake_streamlit()

        render_results(st, {"programs": [PROGRAM, PROGRAM], "supervisors": [SUPERVISOR]})

        st.tabs.assert_called_once()
        assert st.container.call_count == 3
        assert st.download_button.call_count == 2
        footer = st.markdown.call_args.args[0]
        assert PROGRAMMES_URL in footer and PEOPLE_URL in footer

    def test_empty_collections_render_no_cards(self):
        st = fake_streamlit()

        render_results(st, {"programs": [], "supervisors": []})

        st.container.assert_not_called()
        st.download_button.assert_not_called()
