"""
Unit tests for the Bedrock text/vision client
"""

import json

import pytest
from botocore.exceptions import ClientError
from unittest.mock import patch, MagicMock

from farm_intel.exceptions import LLMUnavailable
from farm_intel.llm.bedrock_client import analyze_image, call_llm, split_image_payload


def _bedrock_reply(*texts):
    body = MagicMock()
    body.read.return_value = json.dumps({
        "content": [{"type": "text", "text": t} for t in texts]
    }).encode()
    return {"body": body}


class TestCallLLM:
    """Test cases for text prompts."""

    @patch('farm_intel.llm.bedrock_client.logger')
    @patch('farm_intel.llm.bedrock_client._get_bedrock_client')
    def test_returns_joined_text(self, mock_get_client, mock_logger):
        """Test the reply text blocks are joined."""
        client = MagicMock()
        client.invoke_model.return_value = _bedrock_reply('{"suggestions": ', "[]}")
        mock_get_client.return_value = client

        assert call_llm("Suggest crops") == '{"suggestions": []}'

        request = json.loads(client.invoke_model.call_args.kwargs["body"])
        assert request["messages"][0]["content"] == [{"type": "text", "text": "Suggest crops"}]
        assert request["anthropic_version"] == "bedrock-2023-05-31"

    @patch('farm_intel.llm.bedrock_client.logger')
    @patch('farm_intel.llm.bedrock_client._get_bedrock_client')
    def test_client_error_wrapped(self, mock_get_client, mock_logger):
        """Test botocore errors surface as LLMUnavailable."""
        client = MagicMock()
        client.invoke_model.side_effect = ClientError(
            {"Error": {"Code": "ThrottlingException", "Message": "Rate exceeded"}}, "InvokeModel"
        )
        mock_get_client.return_value = client

        with pytest.raises(LLMUnavailable):
            call_llm("Suggest crops")

    @patch('farm_intel.llm.bedrock_client.logger')
    @patch('farm_intel.llm.bedrock_client._get_bedrock_client')
    def test_garbled_response_wrapped(self, mock_get_client, mock_logger):
        """Test an undecodable response body surfaces as LLMUnavailable."""
        body = MagicMock()
        body.read.return_value = b"not json"
        client = MagicMock()
        client.invoke_model.return_value = {"body": body}
        mock_get_client.return_value = client

        with pytest.raises(LLMUnavailable):
            call_llm("Suggest crops")


class TestAnalyzeImage:
    """Test cases for vision prompts."""

    def test_split_data_url(self):
        """Test the media type is read from a data URL and the prefix stripped."""
        assert split_image_payload("data:image/png;base64,AAAA") == ("image/png", "AAAA")

    def test_split_bare_base64(self):
        """Test bare base64 defaults to JPEG."""
        assert split_image_payload("AAAA") == ("image/jpeg", "AAAA")

    @patch('farm_intel.llm.bedrock_client.logger')
    @patch('farm_intel.llm.bedrock_client._get_bedrock_client')
    def test_image_block_sent(self, mock_get_client, mock_logger):
        """Test the image block precedes the prompt text."""
        client = MagicMock()
        client.invoke_model.return_value = _bedrock_reply("About 1500 sqm")
        mock_get_client.return_value = client

        assert analyze_image("data:image/png;base64,QUJD", "Measure the field") == "About 1500 sqm"

        content = json.loads(client.invoke_model.call_args.kwargs["body"])["messages"][0]["content"]
        assert content[0]["source"] == {"type": "base64", "media_type": "image/png", "data": "QUJD"}
        assert content[1] == {"type": "text", "text": "Measure the field"}
