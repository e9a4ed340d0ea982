"""
Resume Job Match – Streamlit frontend.
No business logic in layout; every action goes through JobSearchSession.
"""

import asyncio
from typing import Awaitable, TypeVar

import streamlit as st

from job_match_ai.config import ADZUNA_APP_ID, ADZUNA_APP_KEY, MAX_UPLOAD_BYTES
from job_match_ai.embeddings.embedding_service import EmbeddingService, get_embedding_service
from job_match_ai.errors import ValidationError
from job_match_ai.schemas.job_posting import JobPosting
from job_match_ai.schemas.resume_profile import ResumeUpload
from job_match_ai.services.job_index import AdzunaJobIndexClient
from job_match_ai.services.text_generation import get_text_generation_service
from job_match_ai.session.job_search_session import JobSearchSession

T = TypeVar("T")

UPLOAD_TYPES = {"txt": "text/plain", "pdf": "application/pdf"}


def _run(coro: Awaitable[T]) -> T:
    """Run one session step on a fresh event loop (Streamlit reruns are synchronous)."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@st.cache_resource
def _embedding_service() -> EmbeddingService:
    """Embedding model loaded once per server process and shared read-only."""
    return get_embedding_service()


def _get_session() -> JobSearchSession:
    if "job_session" not in st.session_state:
        session = JobSearchSession(
            embedding_service=_embedding_service(),
            job_index=AdzunaJobIndexClient(),
            generator=get_text_generation_service(),
        )
        with st.spinner("Loading language model…"):
            _run(session.load_model())
        _run(session.start())
        st.session_state["job_session"] = session
    return st.session_state["job_session"]


def _salary_caption(job: JobPosting) -> str:
    if job.salary_min and job.salary_max:
        return f"Salary: {job.salary_min:,.0f} – {job.salary_max:,.0f}"
    if job.salary_min:
        return f"Salary from {job.salary_min:,.0f}"
    return ""


def _render_job(job: JobPosting) -> None:
    with st.container():
        st.markdown("---")
        col_a, col_b = st.columns([3, 1])
        with col_a:
            st.markdown(f"### {job.title or 'Untitled'}")
            st.caption(f"**Company:** {job.company or '—'} · **Location:** {job.location or '—'}")
            salary = _salary_caption(job)
            if salary:
                st.caption(salary)
        with col_b:
            if job.apply_url:
                st.link_button("Apply", url=job.apply_url, type="secondary")
        if job.description:
            with st.expander("Description"):
                st.markdown(job.description)


def _render_resume_upload(session: JobSearchSession) -> None:
    st.subheader("Upload your resume")
    uploaded = st.file_uploader(
        "Upload your resume (TXT or PDF)",
        type=list(UPLOAD_TYPES),
        key="resume_file",
        disabled=session.is_analyzing,
        help=f"Maximum size {MAX_UPLOAD_BYTES // 1024} KB.",
    )
    if uploaded is None or st.session_state.get("analyzed_file_id") == uploaded.file_id:
        return
    st.session_state["analyzed_file_id"] = uploaded.file_id
    ext = uploaded.name.rsplit(".", 1)[-1].lower()
    upload = ResumeUpload(
        filename=uploaded.name,
        content_type=uploaded.type or UPLOAD_TYPES.get(ext, ""),
        data=uploaded.getvalue(),
    )
    try:
        with st.spinner("Analyzing resume…"):
            profile = _run(session.upload_resume(upload))
    except ValidationError as e:
        st.error(e.message)
        return
    if profile is not None:
        st.session_state["search_box"] = profile.query


def _render_jobs(session: JobSearchSession) -> None:
    st.subheader("Jobs")
    if not ADZUNA_APP_ID or not ADZUNA_APP_KEY:
        st.warning("ADZUNA_APP_ID / ADZUNA_APP_KEY are not set. Add them to your .env file.")

    if "search_box" not in st.session_state:
        st.session_state["search_box"] = session.search.query
    term = st.text_input("Search jobs", placeholder="Search jobs...", key="search_box")
    if term.strip() != session.search.query:
        with st.spinner("Searching…"):
            _run(session.search.set_query(term))

    state = session.search.state
    if state.error:
        st.error(state.error.message)
    if not state.accumulated_jobs:
        if state.query and state.fetched:
            st.info("No jobs found. Try different keywords.")
        elif not state.query:
            st.info("Upload a resume or type keywords to search for jobs.")
        return

    st.markdown(f"**{len(state.accumulated_jobs)} jobs** for *{state.query}*")
    for job in state.accumulated_jobs:
        _render_job(job)

    if state.has_more:
        if st.button("Load more", key="load_more", disabled=state.loading):
            with st.spinner("Loading more jobs…"):
                _run(session.search.on_near_end_of_list())
            st.rerun()
    else:
        st.caption("No more jobs to load.")


def _render_chat(session: JobSearchSession) -> None:
    st.subheader("Job search assistant")
    if session.model_error:
        st.error(session.model_error.message)
    if session.analysis_error:
        st.error(session.analysis_error.message)

    for message in session.chat.messages:
        with st.chat_message(message.role):
            st.markdown(message.content)

    prompt = st.chat_input("Type your message...", disabled=session.chat.is_loading)
    if prompt:
        with st.spinner("Assistant is thinking…"):
            _run(session.ask(prompt))
        st.rerun()
    if session.chat.error:
        st.warning(session.chat.error.message)


def render_layout() -> None:
    """Streamlit page layout."""
    st.set_page_config(page_title="Resume Job Match", layout="wide")
    st.title("Job Search Platform")
    st.markdown("*Upload your resume to find matching jobs and get job-search advice.*")
    st.divider()

    session = _get_session()
    _render_resume_upload(session)

    jobs_tab, chat_tab = st.tabs(["Jobs", "Assistant"])
    with jobs_tab:
        _render_jobs(session)
    with chat_tab:
        _render_chat(session)


if __name__ == "__main__":
    render_layout()
