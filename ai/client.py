"""
Thin wrapper around the Gemini SDK.

Flows build a list of prompt parts (plain strings and ``media(...)`` images)
and ask for a pydantic model back; the wrapper handles the SDK call, the
structured-output config and turning failures into ``AIFlowError``.
"""
import logging

from flask import current_app
from google import genai
from google.genai import errors as genai_errors
from google.genai import types
from pydantic import ValidationError as SchemaError

from utils.errors import AIFlowError
from utils.images import parse_data_uri

logger = logging.getLogger(__name__)


class Media:
    """An inline image prompt part."""

    def __init__(self, data_uri):
        self.mime_type, self.data = parse_data_uri(data_uri)

    def to_part(self):
        return types.Part.from_bytes(data=self.data, mime_type=self.mime_type)

    def __repr__(self):
        return f"<Media {self.mime_type} {len(self.data)} bytes>"


def media(data_uri):
    return Media(data_uri)


class GenAIClient:

    def __init__(self, api_key=None, model="gemini-2.5-flash"):
        self.api_key = api_key
        self.model = model
        self._client = None

    @property
    def client(self):
        # Created on first use so the app starts without credentials
        if self._client is None:
            if not self.api_key:
                raise AIFlowError("GEMINI_API_KEY is not configured.")
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    def generate(self, prompt_parts, output_schema, flow_name=None):
        """Run one prompt and return an ``output_schema`` instance."""
        contents = [p.to_part() if isinstance(p, Media) else p for p in prompt_parts]
        config = types.GenerateContentConfig(
            response_mime_type="application/json",
            response_schema=output_schema,
        )

        try:
            response = self.client.models.generate_content(
                model=self.model,
                contents=contents,
                config=config,
            )
        except genai_errors.APIError as e:
            logger.error("[AI] %s failed: %s", flow_name or output_schema.__name__, e)
            raise AIFlowError(f"AI service error: {e}") from e

        parsed = getattr(response, "parsed", None)
        if isinstance(parsed, output_schema):
            return parsed

        text = getattr(response, "text", None)
        if not text:
            raise AIFlowError("AI service returned an empty response.")
        try:
            return output_schema.model_validate_json(text)
        except SchemaError as e:
            logger.error("[AI] %s returned unparseable output: %s", flow_name or output_schema.__name__, text)
            raise AIFlowError("AI service returned an unexpected response.") from e


def get_client():
    return current_app.extensions["genai_client"]


def init_ai(app):
    app.extensions["genai_client"] = GenAIClient(
        api_key=app.config.get("GEMINI_API_KEY"),
        model=app.config.get("GEMINI_MODEL", "gemini-2.5-flash"),
    )
    return app.extensions["genai_client"]
