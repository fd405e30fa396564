#!/usr/bin/env python3
from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import ReadTimeoutError, EndpointConnectionError, ClientError

from configs.config import Config

logger = logging.getLogger(__name__)

ANTHROPIC_VERSION = "bedrock-2023-05-31"


class BedrockError(Exception):
	def __init__(self, message: str, code: str = "UNKNOWN") -> None:
		super().__init__(message)
		self.code = code


def _classify_client_error(e: ClientError) -> str:
	err = e.response.get("Error", {}) if hasattr(e, "response") else {}
	status = err.get("Code", "") or err.get("StatusCode", "")
	msg = err.get("Message", "")
	low = (str(status) + " " + str(msg)).lower()
	if "throttl" in low or "toomanyrequests" in low or "429" in low:
		return "RATE_LIMIT"
	if "unauthorized" in low or "accessdenied" in low or "403" in low or "401" in low:
		return "UNAUTHORIZED"
	return "UNKNOWN"


class BedrockClient:
	"""Text completion over Bedrock's Anthropic messages API.

	Request in (model id, temperature, role-tagged messages), text out. An empty
	reply is an error: callers patch documents with it.
	"""

	def __init__(
		self,
		runtime: Any = None,
		model_id: Optional[str] = None,
		temperature: Optional[float] = None,
		max_tokens: Optional[int] = None,
	) -> None:
		cfg = Config.get_bedrock_config()
		self.region = cfg["region_name"]
		self.model_id = model_id or cfg["model_id"]
		self.temperature = float(cfg["temperature"] if temperature is None else temperature)
		self.max_tokens = int(max_tokens or cfg["max_tokens"])
		if runtime is None:
			runtime = boto3.client(
				"bedrock-runtime",
				region_name=self.region,
				config=BotoConfig(read_timeout=cfg["read_timeout_s"]),
			)
		self._runtime = runtime

	@staticmethod
	def build_body(messages: List[Dict[str, str]], temperature: float, max_tokens: int) -> Dict[str, Any]:
		system_parts = [m["content"] for m in messages if m.get("role") == "system"]
		chat = [
			{"role": m["role"], "content": [{"type": "text", "text": m["content"]}]}
			for m in messages
			if m.get("role") != "system"
		]
		if not chat:
			raise BedrockError("At least one user message is required", code="INVALID_REQUEST")
		body: Dict[str, Any] = {
			"anthropic_version": ANTHROPIC_VERSION,
			"max_tokens": max_tokens,
			"temperature": temperature,
			"messages": chat,
		}
		if system_parts:
			body["system"] = "\n\n".join(system_parts)
		return body

	@staticmethod
	def extract_text(data: Dict[str, Any]) -> str:
		# { ..., "content": [{"type": "text", "text": "..."}], ... }
		blocks = data.get("content") or []
		if isinstance(blocks, str):
			return blocks
		parts = []
		for block in blocks:
			if isinstance(block, str):
				parts.append(block)
			elif isinstance(block, dict) and block.get("type", "text") == "text":
				parts.append(block.get("text") or "")
		return "".join(parts)

	def complete(
		self,
		messages: List[Dict[str, str]],
		*,
		model_id: Optional[str] = None,
		temperature: Optional[float] = None,
		max_tokens: Optional[int] = None,
	) -> str:
		"""Send the messages and return the reply text (stripped).

		Raises:
			BedrockError: On service errors, unreadable replies, or empty content
		"""
		model = model_id or self.model_id
		temp = self.temperature if temperature is None else float(temperature)
		body = self.build_body(messages, temp, int(max_tokens or self.max_tokens))
		logger.info(f"Requesting completion from {model} (temperature={temp}, messages={len(messages)})")
		try:
			resp = self._runtime.invoke_model(
				modelId=model,
				contentType="application/json",
				accept="application/json",
				body=json.dumps(body).encode("utf-8"),
			)
		except ReadTimeoutError as e:
			raise BedrockError(f"Bedrock request timed out: {e}", code="TIMEOUT")
		except EndpointConnectionError as e:
			raise BedrockError(f"Could not reach Bedrock: {e}", code="NETWORK")
		except ClientError as e:
			raise BedrockError(f"Bedrock error: {e}", code=_classify_client_error(e))

		payload = resp.get("body")
		raw = payload.read() if hasattr(payload, "read") else payload
		if isinstance(raw, (bytes, bytearray)):
			raw = raw.decode("utf-8", errors="replace")
		try:
			data = json.loads(raw) if raw else {}
		except json.JSONDecodeError as e:
			raise BedrockError(f"Invalid JSON response from Bedrock: {e}", code="UNKNOWN")
		if not isinstance(data, dict):
			raise BedrockError(f"Unexpected response shape from Bedrock: {type(data).__name__}", code="UNKNOWN")
		text = self.extract_text(data).strip()
		if not text:
			raise BedrockError("Bedrock returned no content in the completion.", code="EMPTY")
		logger.debug(f"Completion received ({len(text)} chars, stop_reason={data.get('stop_reason')})")
		return text


__all__ = ["BedrockClient", "BedrockError"]
