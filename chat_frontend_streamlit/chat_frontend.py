import logging

import streamlit as st

from chat_frontend_streamlit.conversation import Conversation, Stage
from chat_frontend_streamlit.exchange import ExchangeClient, choose_api_base
from chat_frontend_streamlit.results_view import render_results

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

STAGE_HINTS = {
    Stage.COLLECTING_BACKGROUND: "List the physics courses you completed (at least 4).",
    Stage.COLLECTING_INTERESTS: "Describe the research areas you'd like to explore.",
    Stage.AWAITING_RECOMMENDATIONS: "Answer the advisor's questions to get recommendations.",
    Stage.SHOWING_RESULTS: "Ask anything about the recommendations.",
}

st.set_page_config(page_title="Cambridge Physics Advisor", page_icon="🎓")
st.title("🎓 Cambridge Physics Postgraduate Advisor")

if "api_base" not in st.session_state:
    st.session_state["api_base"] = choose_api_base()
    logger.info(f"Using advisor backend at {st.session_state['api_base']}")

if "conversation" not in st.session_state:
    st.session_state["conversation"] = Conversation(ExchangeClient(st.session_state["api_base"]))

conversation: Conversation = st.session_state["conversation"]

with st.sidebar:
    st.header("About")
    st.write(
        "Share your undergraduate courses and research interests, and the advisor will "
        "suggest postgraduate programmes and supervisors at the Cavendish Laboratory."
    )
    st.caption(f"Stage: {conversation.stage.value}")

    st.markdown("---")
    if st.button("🔄 Reset Conversation", use_container_width=True):
        conversation.reset()
        st.session_state["show_results"] = False
        st.success("Conversation reset successfully!")
        st.rerun()

show_results = st.session_state.get("show_results", False) and conversation.results is not None

if show_results:
    st.subheader("📋 Recommendations")
    if st.button("← Back to Chat"):
        st.session_state["show_results"] = False
        st.rerun()
    render_results(st, conversation.results, key_prefix="chat")
else:
    st.subheader("💬 Chat")

    chat_container = st.container(height=500)
    with chat_container:
        for message in conversation.visible_messages():
            with st.chat_message(message["role"]):
                st.markdown(message["content"])

    if conversation.results is not None:
        if st.button("📋 View Recommendations"):
            st.session_state["show_results"] = True
            st.rerun()

    prompt = st.chat_input(
        STAGE_HINTS[conversation.stage],
        disabled=conversation.is_loading,
    )

    if prompt:
        had_results = conversation.results
        with st.spinner("Thinking..."):
            conversation.submit(prompt)
        # Jump to the cards as soon as a new set of recommendations arrives
        if conversation.results is not None and conversation.results is not had_results:
            st.session_state["show_results"] = True
        st.rerun()
