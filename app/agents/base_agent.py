"""
Base Agent Class

Agents orchestrate one use case: fetch data through service clients, run an
algorithm, and shape a {message, data, proofs} response.
"""

import logging
from typing import Dict, Any, Optional

logger = logging.getLogger(__name__)


class BaseAgent:
    """
    Base class for all agents.

    Provides:
    - Standard execute() method that API handlers call
    - run() method that child classes must implement
    - Helper methods for response formatting
    """

    async def execute(self, context: Dict[str, Any]) -> Dict[str, Any]:
        """
        Main entry point. Wraps run() with standard error handling.

        Args:
            context: Dictionary containing:
                - entities: Dict[str, Any] - Request parameters
                - trace_id: str - Request trace ID
                - auth_header: Optional[str] - Authorization header to forward

        Returns:
            Dict with keys: message, data, proofs
        """
        try:
            return await self.run(context)
        except Exception as e:
            logger.exception(f"{self.__class__.__name__} execution failed: {e}")
            trace_id = context.get("trace_id", "unknown")
            return self.error_response(
                message="I encountered an unexpected error. Please try again.",
                trace_id=trace_id,
                error_type=type(e).__name__
            )

    async def run(self, context: Dict[str, Any]) -> Dict[str, Any]:
        """Core business logic - must be implemented by child classes."""
        raise NotImplementedError(f"{self.__class__.__name__} must implement run() method")

    # ========================================================================
    # Helper Methods for Response Formatting
    # ========================================================================

    def success_response(
        self,
        message: str,
        data: Optional[Dict[str, Any]] = None,
        trace_id: Optional[str] = None,
        **extra_proofs
    ) -> Dict[str, Any]:
        """
        Create a successful response.

        Args:
            message: User-facing success message
            data: Optional data payload
            trace_id: Optional trace ID
            **extra_proofs: Additional fields to include in proofs
        """
        proofs = {}
        if trace_id:
            proofs["trace_id"] = trace_id
        proofs["status"] = "success"
        proofs.update(extra_proofs)

        return {
            "message": message,
            "data": data,
            "proofs": proofs
        }

    def validation_error(
        self,
        message: str,
        suggestion: str,
        missing_field: Optional[str] = None,
        example: Optional[str] = None,
        trace_id: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Create a validation error response.

        Args:
            message: User-facing error message
            suggestion: Helpful suggestion for the caller
            missing_field: Optional field that is missing or invalid
            example: Optional example of valid input
            trace_id: Optional trace ID
        """
        data = {
            "error": "validation_failed",
            "suggestion": suggestion
        }

        if missing_field:
            data["missing_field"] = missing_field

        if example:
            data["example"] = example

        proofs = {}
        if trace_id:
            proofs["trace_id"] = trace_id
        proofs["validation"] = "failed"

        return {
            "message": f"{message}\n\n{suggestion}",
            "data": data,
            "proofs": proofs
        }

    def error_response(
        self,
        message: str,
        trace_id: Optional[str] = None,
        error_type: Optional[str] = None,
        **extra_data
    ) -> Dict[str, Any]:
        """
        Create an error response.

        Args:
            message: User-facing error message
            trace_id: Optional trace ID
            error_type: Optional error type (for debugging)
            **extra_data: Additional fields to include in data
        """
        data = {"error": "execution_failed"}

        if error_type:
            data["error_type"] = error_type

        data.update(extra_data)

        proofs = {}
        if trace_id:
            proofs["trace_id"] = trace_id
        proofs["status"] = "failed"

        return {
            "message": message,
            "data": data,
            "proofs": proofs
        }

    # ========================================================================
    # Helper Methods for Context Extraction
    # ========================================================================

    def get_trace_id(self, context: Dict[str, Any]) -> str:
        """Extract trace_id from context, with fallback."""
        return context.get("trace_id", "unknown")

    def get_entities(self, context: Dict[str, Any]) -> Dict[str, Any]:
        """Extract entities from context, with fallback."""
        return context.get("entities", {})

    def get_auth_header(self, context: Dict[str, Any]) -> Optional[str]:
        """
        Extract Authorization header from context.
        Tries multiple possible field names.
        """
        return (
            context.get("auth_header") or
            context.get("authorization") or
            context.get("Authorization")
        )
