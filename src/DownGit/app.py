"""Streamlit UI for DownGit."""

from __future__ import annotations

import streamlit as st

from DownGit.downloader import download_repository
from DownGit.errors import DownGitError, RateLimitError
from DownGit.models import DownloadResult, ProgressEvent


def _qp(key: str, default: str = "") -> str:
    """Read a query parameter, returning *default* if absent."""
    params = st.query_params
    return params.get(key, default)


def main() -> None:
    st.set_page_config(
        page_title="DownGit",
        page_icon="📦",
        layout="centered",
    )

    # Hide Streamlit's default toolbar (Deploy, Stop, etc.)
    st.markdown(
        "<style>[data-testid='stToolbar'] { display: none; }</style>",
        unsafe_allow_html=True,
    )

    st.title("DownGit")
    st.caption("Download specific folders or files from GitHub repositories as a ZIP.")

    url = st.text_input(
        "GitHub URL",
        value=_qp("url"),
        placeholder="https://github.com/owner/repo/tree/main/folder",
        help="A repository, a folder (/tree/...) or a single file (/blob/...).",
    )

    download_clicked = st.button(
        "Download",
        type="primary",
        use_container_width=True,
        disabled=not url.strip(),
    )

    if download_clicked:
        _run_download(url)

    # Show previous result after rerun (e.g. download button click)
    if not download_clicked and "result" in st.session_state:
        _show_result(st.session_state["result"])

    st.caption(
        "DownGit uses the public GitHub API (60 requests per hour without a token). "
        "Private repositories are not supported."
    )


def _show_result(result: DownloadResult) -> None:
    """Display the download button and per-file failures for a stored result."""
    if result.errors:
        with st.expander(f"⚠ {len(result.errors)} files could not be downloaded"):
            for err in result.errors:
                st.text(err)

    st.download_button(
        label=f"Save {result.filename}",
        data=result.data,
        file_name=result.filename,
        mime="application/zip",
        use_container_width=True,
    )


def _run_download(url: str) -> None:
    progress_bar = st.progress(0, text="Validating URL...")

    def on_progress(event: ProgressEvent) -> None:
        progress_bar.progress(event.percent, text=event.message)

    st.session_state.pop("result", None)
    try:
        result = download_repository(url, on_progress=on_progress)
    except RateLimitError as exc:
        st.error(str(exc))
        st.info("Tip: the unauthenticated limit resets every hour.")
        return
    except DownGitError as exc:
        st.error(str(exc))
        return
    except Exception as exc:
        st.error(f"Unexpected error: {exc}")
        return

    st.success(
        f"Download complete! {result.entry_count} entries in {result.filename}."
    )
    # Save result to session state so it survives reruns
    st.session_state["result"] = result
    _show_result(result)


if __name__ == "__main__":
    main()
