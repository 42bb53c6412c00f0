"""
Test session setup.

The API module creates its engine at import time, so the database and the
workflow log directory are pointed at a throwaway folder before anything
under app/ is imported.
"""

import os
import tempfile

_TMP = tempfile.mkdtemp(prefix="syllabus-tests-")

os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP, 'test.db')}"
os.environ["WORKFLOW_LOG_DIR"] = os.path.join(_TMP, "logs")
# never reach a real backend from tests
os.environ["LLM_API_KEY"] = ""
os.environ["LLM_API_URL"] = "https://llm.test/v1/chat/completions"
