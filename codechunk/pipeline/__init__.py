"""Job orchestration: drives the chunking engine over one ingestion job."""

from codechunk.pipeline.cancellation import CancellationToken
from codechunk.pipeline.orchestrator import TransformationOrchestrator, parse_location_uri

__all__ = ["CancellationToken", "TransformationOrchestrator", "parse_location_uri"]
