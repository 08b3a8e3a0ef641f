"""
LLM-backed requirement oracle.

Talks to any OpenAI-compatible ``/chat/completions`` endpoint (OpenRouter by
default) over ``requests``. Every exchange is recorded so the pipeline can
write a per-course debug transcript.
"""

import json
import logging
import re
from typing import Any, Dict, List, Optional, Union

import requests

from ..config.constants import OracleConfig, SchemaConfig
from ..config.settings import PipelineSettings
from ..core.exceptions import OracleError, OracleResponseError
from ..models.course import CourseInfo, OracleFailure, ParsedCourseRequirements
from ..utils import retry_on_exception
from . import prompts
from .examples import RequirementExample, examples_for

logger = logging.getLogger(__name__)

_CODE_BLOCK = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```", re.IGNORECASE)


def strip_code_fences(content: str) -> str:
    """Remove a surrounding ```json ... ``` (or bare ```) fence."""
    text = content.strip()
    if text.startswith("```json"):
        text = re.sub(r"^```json\s*", "", text)
        text = re.sub(r"\s*```$", "", text)
    elif text.startswith("```"):
        text = re.sub(r"^```\s*", "", text)
        text = re.sub(r"\s*```$", "", text)
    return text


def decode_json_object(content: str) -> Dict[str, Any]:
    """
    Decode an oracle answer into a JSON object.

    Raises:
        OracleResponseError: If the answer is not JSON or not an object
    """
    try:
        data = json.loads(strip_code_fences(content))
    except json.JSONDecodeError as e:
        raise OracleResponseError(f"Failed to parse LLM response as JSON: {e}", content) from e
    if not isinstance(data, dict):
        raise OracleResponseError("LLM response is not a JSON object", content)
    return data


class OracleClient:
    """Translates course requirement text into schema JSON via an LLM."""

    def __init__(self, api_key: str, model: str = OracleConfig.DEFAULT_MODEL,
                 base_url: str = OracleConfig.BASE_URL,
                 schema_version: str = SchemaConfig.SCHEMA_VERSION,
                 timeout: int = 60, max_retries: int = 2,
                 session: Optional[requests.Session] = None,
                 examples: Optional[List[RequirementExample]] = None):
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.schema_version = schema_version
        self.timeout = timeout
        self.max_retries = max_retries
        self.examples = examples
        self.session = session or requests.Session()
        self.session.headers.update({
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        })
        self.logger = logging.getLogger(self.__class__.__name__)
        self._exchanges: List[Dict[str, Any]] = []

    @classmethod
    def from_settings(cls, settings: PipelineSettings,
                      session: Optional[requests.Session] = None) -> "OracleClient":
        settings.require_api_key()
        return cls(
            api_key=settings.api_key,
            model=settings.model,
            base_url=settings.base_url,
            schema_version=settings.schema_version,
            timeout=settings.request_timeout,
            max_retries=settings.max_retries,
            session=session,
        )

    # ========================================
    # TRANSPORT
    # ========================================

    @property
    def completions_url(self) -> str:
        return f"{self.base_url}/chat/completions"

    def _post(self, payload: Dict[str, Any]) -> requests.Response:
        return self.session.post(self.completions_url, json=payload, timeout=self.timeout)

    def _complete(self, system: str, user: str, max_tokens: Optional[int] = None) -> str:
        """
        Run one chat completion and return the assistant's text.

        Raises:
            OracleError: On network failure or an HTTP error status
            OracleResponseError: If the response carries no message content
        """
        payload: Dict[str, Any] = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
            "temperature": OracleConfig.TEMPERATURE,
        }
        if max_tokens:
            payload["max_completion_tokens"] = max_tokens

        post = retry_on_exception(
            max_retries=self.max_retries,
            delay=2.0,
            exceptions=(requests.ConnectionError, requests.Timeout),
        )(self._post)
        try:
            response = post(payload)
            response.raise_for_status()
        except requests.RequestException as e:
            raise OracleError(f"API call failed: {e}") from e

        try:
            content = response.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise OracleResponseError(f"Malformed completion response: {e}") from e
        if not content:
            raise OracleResponseError("No response from LLM")
        return content.strip()

    # ========================================
    # TRANSCRIPT
    # ========================================

    def _record(self, step: str, prompt: str, response: str, success: bool,
                error: Optional[str] = None, examples: int = 0, attempt: int = 1) -> None:
        exchange = {
            "step": step,
            "attempt": attempt,
            "prompt": prompt,
            "response": response,
            "success": success,
            "relevantExamples": examples,
        }
        if error:
            exchange["error"] = error
        self._exchanges.append(exchange)

    def transcript(self) -> List[Dict[str, Any]]:
        """Return and clear the exchanges recorded since the last call."""
        exchanges, self._exchanges = self._exchanges, []
        return exchanges

    def relevant_examples(self, course: CourseInfo) -> List[RequirementExample]:
        return examples_for(course, self.examples)

    # ========================================
    # ORACLE STEPS
    # ========================================

    def check_ambiguity(self, course: CourseInfo) -> Union[None, str, OracleFailure]:
        """
        Ask whether the course text fits the schema at all.

        Returns:
            None when the oracle answers CLEAR, the reason given when it does
            not, or an OracleFailure when the oracle could not be reached
        """
        examples = self.relevant_examples(course)
        prompt = prompts.ambiguity_prompt(course, examples)
        try:
            content = self._complete(prompts.AMBIGUITY_SYSTEM_PROMPT, prompt)
        except OracleError as e:
            reason = f"Error during ambiguity check: {e}"
            self._record("Ambiguity Check", prompt, f"API Error: {e}", False, reason, len(examples))
            return OracleFailure(reason=reason)

        clear = content.startswith(OracleConfig.CLEAR_VERDICT)
        reason = None
        if not clear:
            reason = (
                content.replace(OracleConfig.AMBIGUOUS_VERDICT, "", 1).strip()
                or "Requirements cannot be clearly represented"
            )
        self._record("Ambiguity Check", prompt, content, clear, reason, len(examples))
        return reason

    def parse(self, course: CourseInfo) -> Union[Dict[str, Any], OracleFailure]:
        """Produce a candidate (unvalidated) parse of the course's requirements."""
        examples = self.relevant_examples(course)
        return self._request_parse(
            "Parse Requirements", course, examples,
            prompts.parse_system_prompt(examples), prompts.parse_user_prompt(course), attempt=1,
        )

    def revise(self, course: CourseInfo, previous: Dict[str, Any], feedback: str,
               attempt: int = 2) -> Union[Dict[str, Any], OracleFailure]:
        """Ask for a corrected parse given feedback on a previous one."""
        examples = self.relevant_examples(course)
        return self._request_parse(
            "Retry Parse", course, examples,
            prompts.parse_system_prompt(examples),
            prompts.revision_prompt(course, previous, feedback), attempt=attempt,
        )

    def _request_parse(self, step: str, course: CourseInfo, examples: List[RequirementExample],
                       system: str, user: str, attempt: int) -> Union[Dict[str, Any], OracleFailure]:
        full_prompt = f"SYSTEM PROMPT:\n{system}\n\nUSER PROMPT:\n{user}"
        try:
            content = self._complete(system, user)
        except OracleError as e:
            self._record(step, full_prompt, f"API Error: {e}", False, str(e), len(examples), attempt)
            return OracleFailure(reason=str(e))

        try:
            parsed = decode_json_object(content)
        except OracleResponseError as e:
            self._record(step, full_prompt, content, False, str(e), len(examples), attempt)
            return OracleFailure(reason=str(e))
        self._record(step, full_prompt, content, True, None, len(examples), attempt)

        if "error" in parsed:
            return OracleFailure(
                reason=str(parsed.get("reason") or "Oracle declined to parse"),
                confidence=parsed.get("confidence"),
            )

        parsed["department"] = course.department
        parsed["number"] = course.number
        parsed["schema_version"] = self.schema_version
        return parsed

    def review(self, course: CourseInfo, parsed: ParsedCourseRequirements) -> Optional[str]:
        """
        Get a second opinion on whether a parse is faithful to the text.

        A rejection that suggests JSON identical to the parse is treated
        as approval.

        Returns:
            None when the parse is approved, otherwise the reason given
        """
        examples = self.relevant_examples(course)
        parsed_dict = parsed.to_dict()
        prompt = prompts.review_prompt(course, parsed_dict)
        try:
            content = self._complete(
                prompts.REVIEW_SYSTEM_PROMPT, prompt, OracleConfig.MAX_COMPLETION_TOKENS
            )
        except OracleError as e:
            reason = f"Error during LLM validation: {e}"
            self._record("LLM Validation", prompt, f"API Error: {e}", False, reason, len(examples))
            return reason

        # "INVALID" does not start with "VALID", so the prefix check is safe
        if content.startswith(OracleConfig.VALID_VERDICT):
            self._record("LLM Validation", prompt, content, True, None, len(examples))
            return None

        suggestion = self._suggested_json(content)
        if suggestion is not None:
            for key in ("department", "number", "schema_version"):
                suggestion.setdefault(key, parsed_dict[key])
            if suggestion == parsed_dict:
                self.logger.info(f"{course.course_id}: reviewer suggested identical JSON, treating as valid")
                self._record("LLM Validation", prompt, content, True, None, len(examples))
                return None

        reason = re.sub(r"^INVALID\s*", "", content, flags=re.IGNORECASE)
        reason = _CODE_BLOCK.sub("", reason, count=1).strip() or "JSON does not match requirements"
        self._record("LLM Validation", prompt, content, False, reason, len(examples))
        return reason

    @staticmethod
    def _suggested_json(content: str) -> Optional[Dict[str, Any]]:
        match = _CODE_BLOCK.search(content)
        if not match:
            return None
        try:
            data = json.loads(match.group(1))
        except json.JSONDecodeError:
            return None
        return data if isinstance(data, dict) else None
