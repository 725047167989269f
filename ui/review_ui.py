import streamlit as st

from core.schemas import NonContractNote, RiskyClause, UnparsedFragment, finding_from_dict
from core.task import EffortLevel, Priority
from main import initialize_system

st.set_page_config(page_title="Contract Review Assistant", page_icon="⚖️", layout="centered")
st.title("⚖️ Contract Review Assistant")

st.write("""
Paste a contract or upload a plain-text file. The assistant flags risky clauses,
can draft a renegotiation email and can file a review task in Notion.
""")


@st.cache_resource
def get_pipeline():
    return initialize_system()


# Sidebar for task settings
with st.sidebar:
    st.header("Review Task")
    email = st.text_input("Your email (optional)")
    include_draft = st.checkbox("Draft a renegotiation email")
    create_task = st.checkbox("Create a Notion task")
    due_date = st.date_input("Due date")
    priority = st.selectbox("Priority", [p.value for p in Priority])
    effort = st.selectbox("Effort level", [e.value for e in EffortLevel], index=1)
    task_types = st.text_input("Task type (comma separated)", value="Polish")

input_type = st.radio("Input Type", ["Text", "Text File"])
if input_type == "Text":
    text = st.text_area("Paste document text", height=250)
else:
    upload = st.file_uploader("Upload a .txt file", type=["txt"])
    text = upload.read().decode("utf-8", errors="replace") if upload else ""

if st.button("Analyze", use_container_width=True):
    options = {
        "assignee_email": email or None,
        "include_draft": include_draft,
        "due_date": due_date,
        "priority": priority,
        "effort_level": effort,
        "task_type": [t for t in task_types.split(",") if t.strip()],
    }
    with st.spinner("Analyzing..."):
        try:
            result = get_pipeline().submit(text, options, requester_email=email or None, create_task=create_task)
        except Exception as e:
            st.error(f"Exception: {e}")
            st.stop()
    # Kept as plain data so the results survive widget reruns
    st.session_state["last_review"] = result.model_dump()

review = st.session_state.get("last_review")
if review:
    analysis = review["analysis"]
    if analysis["findings"] is None:
        st.error(analysis["message"])
        st.stop()

    st.success(analysis["message"])
    for finding in map(finding_from_dict, analysis["findings"]):
        if isinstance(finding, RiskyClause):
            with st.expander(finding.clause[:80]):
                st.markdown(f"**Risk:** {finding.risk}")
                st.markdown(f"**Suggestion:** {finding.suggestion}")
        elif isinstance(finding, NonContractNote):
            st.info(f"{finding.reason}\n\n{finding.summary}")
        elif isinstance(finding, UnparsedFragment):
            st.warning(f"Could not parse part of the reply:\n\n{finding.raw_text}")

    if review["draft"]:
        st.subheader("Renegotiation Draft")
        st.text_area("Draft", review["draft"], height=300)
    if review["draft_error"]:
        st.warning(review["draft_error"])
    task = review["task"]
    if task:
        if task["created"]:
            st.success(f"{task['message']}: {task['url'] or task['page_id']}")
        else:
            st.warning(task["message"])
