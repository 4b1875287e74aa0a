import logging

import streamlit as st

from chat_frontend_streamlit.conversation import ERROR_MESSAGE, request_recommendations
from chat_frontend_streamlit.course_list import MAX_COURSES, MIN_COURSES, CourseList, CourseListError
from chat_frontend_streamlit.exchange import ExchangeClient, ExchangeError, choose_api_base
from chat_frontend_streamlit.results_view import render_results

logger = logging.getLogger(__name__)

STEP_TITLES = {
    "background": "Your Physics Background",
    "interests": "Your Research Interests",
    "results": "Recommended Programs & Supervisors",
}

st.set_page_config(page_title="Guided Advisor", page_icon="🧭")

if "api_base" not in st.session_state:
    st.session_state["api_base"] = choose_api_base()
if "guided_client" not in st.session_state:
    st.session_state["guided_client"] = ExchangeClient(st.session_state["api_base"])
if "guided_courses" not in st.session_state:
    st.session_state["guided_courses"] = CourseList()
if "guided_step" not in st.session_state:
    st.session_state["guided_step"] = "background"
st.session_state.setdefault("guided_interests", "")
st.session_state.setdefault("guided_results", None)
st.session_state.setdefault("guided_reply", "")
# Widget keys are suffixed so clearing can hand out fresh inputs
st.session_state.setdefault("guided_nonce", 0)

courses: CourseList = st.session_state["guided_courses"]
step = st.session_state["guided_step"]


def _reset():
    courses.clear()
    st.session_state["guided_step"] = "background"
    st.session_state["guided_interests"] = ""
    st.session_state["guided_results"] = None
    st.session_state["guided_reply"] = ""
    st.session_state["guided_nonce"] += 1


st.title(STEP_TITLES[step])

if step == "background":
    st.write(
        f"Please add at least {MIN_COURSES} physics courses you have completed during your "
        f"undergraduate degree. You can add up to {MAX_COURSES} courses."
    )

    with st.form(f"add_course_{st.session_state['guided_nonce']}", clear_on_submit=True):
        new_course = st.text_input(
            "Course",
            placeholder="Enter a physics course (e.g., Quantum Mechanics)",
        )
        added = st.form_submit_button("➕ Add", disabled=courses.is_full)

    if added:
        try:
            courses.add(new_course)
        except CourseListError as e:
            st.error(str(e))

    if len(courses):
        st.caption(courses.summary())
        for index, course in enumerate(courses.courses):
            c1, c2 = st.columns([9, 1])
            c1.write(course)
            if c2.button("✖", key=f"remove_course_{index}"):
                courses.remove(index)
                st.rerun()

    if st.button("Next →", type="primary"):
        if not courses.is_complete:
            st.warning(f"Please add at least {MIN_COURSES} courses before proceeding")
        else:
            st.session_state["guided_step"] = "interests"
            st.rerun()

elif step == "interests":
    st.write(
        "Please describe your research interests and areas you would like to explore "
        "in your postgraduate studies."
    )
    interests = st.text_area(
        "Research interests",
        value=st.session_state["guided_interests"],
        placeholder="Enter your research interests...",
        height=160,
    )
    st.session_state["guided_interests"] = interests

    c1, c2 = st.columns(2)
    with c1:
        if st.button("← Back", use_container_width=True):
            st.session_state["guided_step"] = "background"
            st.rerun()
    with c2:
        if st.button("Get Recommendations", type="primary", use_container_width=True):
            if not interests.strip():
                st.warning("Please enter your research interests before proceeding")
            else:
                client = st.session_state["guided_client"]
                try:
                    with st.spinner("Generating recommendations..."):
                        results, reply = request_recommendations(client, courses.courses, interests)
                except ExchangeError as e:
                    logger.error(f"Error generating recommendations: {e}")
                    st.error(ERROR_MESSAGE)
                else:
                    st.session_state["guided_results"] = results
                    st.session_state["guided_reply"] = reply
                    st.session_state["guided_step"] = "results"
                    st.rerun()

else:
    st.info(st.session_state["guided_reply"])
    render_results(st, st.session_state["guided_results"], key_prefix="guided")

    c1, c2 = st.columns(2)
    with c1:
        if st.button("← Back", use_container_width=True):
            st.session_state["guided_step"] = "interests"
            st.rerun()
    with c2:
        if st.button("🔄 Start Over", use_container_width=True):
            _reset()
            st.rerun()
