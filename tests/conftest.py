"""Shared pytest fixtures for the codechunk test suite."""

from __future__ import annotations

import json
import sys
from typing import Any

import pytest

from codechunk.config.settings import Settings
from codechunk.interfaces.object_store import IObjectStore
from codechunk.utils.errors import StorageError
from codechunk.utils.logging import configure_logging

# Render to the process stderr rather than a per-test capture stream, which
# pytest closes while cached loggers still hold it.
configure_logging(log_level="DEBUG", stream=sys.__stderr__)

# ---------------------------------------------------------------------------
# Sample sources
# ---------------------------------------------------------------------------

JAVA_FOO = """public class Foo {
    public void bar() {
    }
}
"""

JAVA_TWO_METHODS = """public class Calculator {
    public int add(int a, int b) {
        return a + b;
    }

    public int sub(int a, int b) {
        return a - b;
    }
}
"""

TS_ARROW = "const add = (a: number, b: number) => a + b;\n"

TS_EXPORTED = """export function greet(name: string): string {
    return `hello ${name}`;
}

interface Shape {
    area(): number;
}
"""

CSHARP_WIDGET = """namespace Demo
{
    public class Widget
    {
        public int Size()
        {
            return 1;
        }
    }
}
"""

MARKDOWN_DOC = """# Title

First paragraph of the document.

Second paragraph
spans two lines.
"""


# ---------------------------------------------------------------------------
# In-memory object store
# ---------------------------------------------------------------------------


class InMemoryObjectStore(IObjectStore):
    """Dict-backed object store with optional failure injection.

    ``fail_gets`` / ``fail_puts`` give the number of upcoming calls that
    raise ``StorageError`` before calls start succeeding again.
    """

    def __init__(self) -> None:
        self.objects: dict[tuple[str, str], bytes] = {}
        self.put_calls: list[tuple[str, str]] = []
        self.get_calls: list[tuple[str, str]] = []
        self.fail_gets = 0
        self.fail_puts = 0

    async def get_object(self, bucket: str, key: str) -> bytes:
        self.get_calls.append((bucket, key))
        if self.fail_gets > 0:
            self.fail_gets -= 1
            raise StorageError("injected get failure", provider_name="memory")
        try:
            return self.objects[(bucket, key)]
        except KeyError:
            raise StorageError(f"No such key: {bucket}/{key}", provider_name="memory") from None

    async def put_object(
        self,
        bucket: str,
        key: str,
        body: bytes,
        content_type: str = "application/json",
    ) -> None:
        self.put_calls.append((bucket, key))
        if self.fail_puts > 0:
            self.fail_puts -= 1
            raise StorageError("injected put failure", provider_name="memory")
        self.objects[(bucket, key)] = body

    def get_provider_name(self) -> str:
        return "memory"

    # -- helpers --------------------------------------------------------

    def put_batch(self, bucket: str, key: str, *bodies: str) -> None:
        """Store a content batch holding one entry per body."""
        document = {"fileContents": [{"contentBody": b, "contentType": "TEXT"} for b in bodies]}
        self.objects[(bucket, key)] = json.dumps(document).encode("utf-8")

    def read_json(self, bucket: str, key: str) -> dict[str, Any]:
        return json.loads(self.objects[(bucket, key)])


def make_input_file(uri: str, batch_keys: list[str], metadata: dict[str, str] | None = None) -> dict:
    entry: dict[str, Any] = {
        "originalFileLocation": {"type": "S3", "s3_location": {"uri": uri}},
        "contentBatches": [{"key": key} for key in batch_keys],
    }
    if metadata is not None:
        entry["fileMetadata"] = metadata
    return entry


def make_event(input_files: list[dict], job_id: str = "job-1", bucket: str = "src-bucket") -> dict:
    return {
        "version": "1.0",
        "knowledgeBaseId": "kb-1",
        "dataSourceId": "ds-1",
        "ingestionJobId": job_id,
        "bucketName": bucket,
        "priorTask": "CHUNKING",
        "inputFiles": input_files,
    }


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def memory_store() -> InMemoryObjectStore:
    return InMemoryObjectStore()


@pytest.fixture
def settings() -> Settings:
    """Settings with an output bucket, no retry backoff and no .env influence."""
    return Settings(
        _env_file=None,
        transformation_bucket="out-bucket",
        output_prefix="transformations",
        storage_backend="local",
        storage_retry_backoff_seconds=0.0,
    )
