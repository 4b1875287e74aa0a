from typing import Dict, List, Optional

import pandas as pd

PROGRAMMES_URL = "https://www.phy.cam.ac.uk/study/postgraduate/"
PEOPLE_URL = "https://www.phy.cam.ac.uk/people/"

PROGRAM_COLUMNS = ["name", "description", "url", "supervisors"]
SUPERVISOR_COLUMNS = ["name", "department", "researchArea", "description", "url"]


def _supervisor_department(supervisor: Dict) -> str:
    return supervisor.get("department") or supervisor.get("university") or ""


def _supervisor_research(supervisor: Dict) -> str:
    return (
        supervisor.get("researchArea")
        or supervisor.get("research")
        or supervisor.get("field")
        or ""
    )


def format_program_card(program: Dict) -> str:
    lines = [f"#### {program.get('name', '')}"]
    if program.get("description"):
        lines.append(program["description"])
    if program.get("supervisors"):
        lines.append("**Suggested Supervisors:**")
        lines.extend(f"- {name}" for name in program["supervisors"])
    if program.get("url"):
        lines.append(f"[Learn more ↗]({program['url']})")
    return "\n\n".join(lines)


def format_supervisor_card(supervisor: Dict) -> str:
    lines = [f"#### {supervisor.get('name', '')}"]
    department = _supervisor_department(supervisor)
    if department:
        lines.append(f"*{department}*")
    research = _supervisor_research(supervisor)
    if research:
        lines.append(research)
    if supervisor.get("description"):
        lines.append(supervisor["description"])
    if supervisor.get("url"):
        lines.append(f"[View profile ↗]({supervisor['url']})")
    return "\n\n".join(lines)


def results_to_csv(rows: List[Dict], kind: str) -> bytes:
    """CSV bytes for the programs or supervisors collection, with a fixed column order."""
    if kind == "programs":
        columns = PROGRAM_COLUMNS
        records = [
            {**row, "supervisors": "; ".join(row.get("supervisors") or [])}
            for row in rows
        ]
    elif kind == "supervisors":
        columns = SUPERVISOR_COLUMNS
        records = [
            {
                **row,
                "department": _supervisor_department(row),
                "researchArea": _supervisor_research(row),
            }
            for row in rows
        ]
    else:
        raise ValueError(f"Unknown results kind: {kind}")

    df = pd.DataFrame(records)
    # Make sure all columns exist, even if the reply didn't send them
    for col in columns:
        if col not in df.columns:
            df[col] = ""
    return df[columns].fillna("").to_csv(index=False).encode("utf-8")


def render_results(st, results: Optional[Dict[str, List[Dict]]], key_prefix: str = "results"):
    """Draw the recommendation tabs into a Streamlit module or container."""
    if not results:
        return

    programs = results.get("programs") or []
    supervisors = results.get("supervisors") or []

    tab_programs, tab_supervisors = st.tabs(["🎓 Programs", "🔬 Supervisors"])

    with tab_programs:
        for program in programs:
            st.container(border=True).markdown(format_program_card(program))
        if programs:
            st.download_button(
                label="⬇️ Download programs (CSV)",
                data=results_to_csv(programs, "programs"),
                file_name="recommended_programs.csv",
                mime="text/csv",
                key=f"{key_prefix}_download_programs",
            )

    with tab_supervisors:
        for supervisor in supervisors:
            st.container(border=True).markdown(format_supervisor_card(supervisor))
        if supervisors:
            st.download_button(
                label="⬇️ Download supervisors (CSV)",
                data=results_to_csv(supervisors, "supervisors"),
                file_name="recommended_supervisors.csv",
                mime="text/csv",
                key=f"{key_prefix}_download_supervisors",
            )

    st.markdown(
        f"[All postgraduate programmes]({PROGRAMMES_URL}) · [Department people]({PEOPLE_URL})"
    )
