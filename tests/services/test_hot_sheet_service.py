"""
Hot Sheet Service Tests
=======================

Input sanitising, reply parsing and provider error translation.

Copyright 2024-2025 SKU Studio
All Rights Reserved
Proprietary License
"""

from unittest.mock import AsyncMock

import pytest

from clients.anthropic import ContentBlock, MessageResponse
from clients.exceptions import ProviderDecodeError, ProviderStatusError, ProviderTimeoutError
from prompts.hot_sheet import HOT_SHEET_SYSTEM_PROMPT, build_hot_sheet_user_message
from services.hot_sheet import HotSheetService, parse_hot_sheet_json, sanitize_brand_name, sanitize_retailer
from services.hot_sheet.hot_sheet_service import strip_code_fence
from services.infrastructure.http.errors import BadGatewayError, BadRequestError, GatewayTimeoutError


def text_reply(text: str) -> MessageResponse:
    return MessageResponse(content=[ContentBlock(type="text", text=text)])


class TestSanitising:

    @pytest.mark.parametrize("raw,expected", [
        ("  Olaplex  ", "Olaplex"),
        ("Ben & Jerry's", "Ben & Jerry's"),
        ("Dr. Jart+, Inc.", "Dr. Jart, Inc."),
        ("<script>alert(1)</script>", "scriptalert1script"),
        ("Brand\"; DROP", "Brand DROP"),
        ("Crème-Brûlée Co", "Crème-Brûlée Co"),
        ("!!!", ""),
    ])
    def test_brand_name(self, raw, expected):
        assert sanitize_brand_name(raw) == expected

    def test_brand_name_truncated_to_100(self):
        assert len(sanitize_brand_name("a" * 150)) == 100

    def test_retailer_trimmed_and_truncated(self):
        assert sanitize_retailer("  Target  ") == "Target"
        assert len(sanitize_retailer("r" * 80)) == 50

    def test_user_message_with_and_without_retailer(self):
        assert build_hot_sheet_user_message("Olaplex", "Target") == (
            'Create a Hot Sheet for the brand "Olaplex" for Target. Return only valid JSON.'
        )
        assert build_hot_sheet_user_message("Olaplex", "") == (
            'Create a Hot Sheet for the brand "Olaplex". Return only valid JSON.'
        )


class TestReplyParsing:

    @pytest.mark.parametrize("text", [
        '{"whyItsHot": "x"}',
        '```json\n{"whyItsHot": "x"}\n```',
        '```\n{"whyItsHot": "x"}\n```',
        '  ```json{"whyItsHot": "x"}```  ',
    ])
    def test_fenced_and_bare_json(self, text):
        assert parse_hot_sheet_json(text) == {"whyItsHot": "x"}

    def test_only_outer_fences_are_removed(self):
        assert strip_code_fence('```json\n{"a": "```"}\n```') == '{"a": "```"}'

    def test_invalid_json(self):
        with pytest.raises(BadGatewayError) as exc_info:
            parse_hot_sheet_json("Here is your Hot Sheet: {")
        assert exc_info.value.message == "AI returned invalid JSON"

    def test_top_skus_numbers_pass_through(self):
        parsed = parse_hot_sheet_json('{"topSkus": [{"name": "No. 3", "msrp": 30.0, "offerPrice": 0}]}')
        assert parsed["topSkus"][0]["msrp"] == 30.0

    @pytest.mark.parametrize("text", [
        '{"topSkus": [{"msrp": NaN}]}',
        '{"topSkus": [{"msrp": Infinity}]}',
        '{"topSkus": [{"msrp": -Infinity}]}',
        '{"topSkus": [{"msrp": 1e999}]}',
    ])
    def test_non_finite_numbers_are_invalid(self, text):
        with pytest.raises(BadGatewayError) as exc_info:
            parse_hot_sheet_json(text)
        assert exc_info.value.message == "AI returned invalid JSON"


class TestGenerate:

    @staticmethod
    def service_with(create_message) -> HotSheetService:
        client = AsyncMock()
        client.create_message = create_message
        return HotSheetService(client)

    @pytest.mark.asyncio
    async def test_sends_system_prompt_and_user_message(self):
        create = AsyncMock(return_value=text_reply('{"whyItsHot": "Trending"}'))
        result = await self.service_with(create).generate("  Olaplex!! ", " Ulta ")

        assert result == {"whyItsHot": "Trending"}
        args = create.await_args
        assert args.args[0] == HOT_SHEET_SYSTEM_PROMPT
        assert args.args[1] == 'Create a Hot Sheet for the brand "Olaplex" for Ulta. Return only valid JSON.'

    @pytest.mark.asyncio
    async def test_empty_brand_never_calls_provider(self):
        create = AsyncMock()
        with pytest.raises(BadRequestError) as exc_info:
            await self.service_with(create).generate("   ***   ", "")
        assert exc_info.value.message == "Brand name is required"
        create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_non_text_first_block(self):
        reply = MessageResponse(content=[ContentBlock(type="tool_use")])
        with pytest.raises(BadGatewayError) as exc_info:
            await self.service_with(AsyncMock(return_value=reply)).generate("Olaplex", "")
        assert exc_info.value.message == "Unexpected AI response format"

    @pytest.mark.asyncio
    async def test_empty_content(self):
        reply = MessageResponse(content=[])
        with pytest.raises(BadGatewayError) as exc_info:
            await self.service_with(AsyncMock(return_value=reply)).generate("Olaplex", "")
        assert exc_info.value.message == "Unexpected AI response format"

    @pytest.mark.asyncio
    async def test_timeout(self):
        create = AsyncMock(side_effect=ProviderTimeoutError("slow", provider="anthropic"))
        with pytest.raises(GatewayTimeoutError) as exc_info:
            await self.service_with(create).generate("Olaplex", "")
        assert exc_info.value.message == "AI generation timed out"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error", [
        ProviderStatusError(529, provider="anthropic"),
        ProviderStatusError(401, provider="anthropic"),
        ProviderDecodeError("bad", provider="anthropic"),
    ])
    async def test_provider_failures(self, error):
        with pytest.raises(BadGatewayError) as exc_info:
            await self.service_with(AsyncMock(side_effect=error)).generate("Olaplex", "")
        assert exc_info.value.message == "AI generation failed"
