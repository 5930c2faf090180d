import json
import unittest
from decimal import Decimal
from unittest.mock import MagicMock, patch

from pydantic import BaseModel, ValidationError

from onchain_ad_agent.constants import NETWORKS
from onchain_ad_agent.errors import UploadError
from onchain_ad_agent.profiles import load_profile
from onchain_ad_agent.tools.base import ToolDescriptor
from onchain_ad_agent.tools.create_ad import create_ad_tool
from onchain_ad_agent.tools.image_generation import ImageGenerator, create_image_generation_tool
from onchain_ad_agent.tools.registry import ToolRegistry, build_tool_registry
from onchain_ad_agent.tools.s3_upload import create_s3_upload_tool
from onchain_ad_agent.tools.wallet_tools import create_wallet_tools

AD_ARGS = {"to": "0xabc", "title": "T", "text": "X", "imageURL": "https://s3/ad.png"}


class EchoInput(BaseModel):
    text: str


def echo_tool(name="echo"):
    return ToolDescriptor(name=name, description="Echo", args_schema=EchoInput, handler=lambda p: p.text)


class TestToolDescriptor(unittest.TestCase):
    def test_call_validates_and_dispatches(self):
        self.assertEqual(echo_tool()(text="hi"), "hi")

    def test_invalid_arguments_rejected(self):
        with self.assertRaises(ValidationError):
            echo_tool()(wrong="hi")

    def test_parameters_schema(self):
        schema = echo_tool().parameters()
        self.assertEqual(schema["required"], ["text"])


class TestToolRegistry(unittest.TestCase):
    def test_preserves_order(self):
        registry = ToolRegistry([echo_tool("a"), echo_tool("b")])
        registry.register(echo_tool("c"))
        self.assertEqual(registry.names(), ["a", "b", "c"])
        self.assertEqual(len(registry), 3)
        self.assertEqual(registry.get("b").name, "b")
        self.assertIsNone(registry.get("zzz"))

    def test_duplicate_names_logged_not_rejected(self):
        registry = ToolRegistry([echo_tool("a")])
        with self.assertLogs("onchain_ad_agent.tools.registry", level="WARNING"):
            registry.register(echo_tool("a"))
        self.assertEqual(registry.names(), ["a", "a"])

    def test_build_registry_does_not_invoke_anything(self):
        wallet, uploader, generator = MagicMock(), MagicMock(), MagicMock()
        registry = build_tool_registry(
            wallet, uploader, generator, load_profile("ad-strategist"), NETWORKS["base-sepolia"]
        )
        self.assertEqual(
            registry.names(),
            ["get_wallet_details", "get_balance", "transfer", "generate_image", "upload_to_s3", "create_ad"],
        )
        wallet.invoke_contract.assert_not_called()
        uploader.upload.assert_not_called()
        generator.generate.assert_not_called()


class TestCreateAdTool(unittest.TestCase):
    def setUp(self):
        self.profile = load_profile("ad-strategist")

    @patch("onchain_ad_agent.tools.create_ad.invoke_contract", return_value="ok")
    def test_forwards_to_invoker(self, mock_invoke):
        wallet = MagicMock()
        tool = create_ad_tool(wallet, self.profile, NETWORKS["base-sepolia"])

        self.assertEqual(tool(args=AD_ARGS), "ok")
        mock_invoke.assert_called_once_with(
            wallet,
            self.profile.contract.address,
            "createAd",
            self.profile.contract.abi,
            AD_ARGS,
            tx_url_template="https://sepolia.basescan.org/tx/{tx_hash}",
            asset_url_template="https://testnets.opensea.io/{recipient}",
        )
        self.assertIn("Final contract checklist", tool.description)

    def test_end_to_end_with_stub_wallet(self):
        wallet = MagicMock()
        wallet.invoke_contract.return_value.wait.return_value = {"transactionHash": "0xdead"}
        tool = create_ad_tool(wallet, self.profile, NETWORKS["base-mainnet"])

        result = tool(args=AD_ARGS)
        self.assertIn("https://basescan.org/tx/0xdead", result)
        self.assertIn("https://opensea.io/0xabc", result)

    def test_missing_field_rejected(self):
        tool = create_ad_tool(MagicMock(), self.profile, NETWORKS["base-sepolia"])
        with self.assertRaises(ValidationError):
            tool(args={"to": "0xabc"})


class TestS3UploadTool(unittest.TestCase):
    def test_returns_s3_url(self):
        uploader = MagicMock()
        uploader.upload.return_value = "https://placeholderads.s3.ap-south-1.amazonaws.com/ad-images/1-2.png"
        tool = create_s3_upload_tool(uploader)

        result = tool(dallEImageUrl="https://images.example.com/a.png")
        uploader.upload.assert_called_once_with("https://images.example.com/a.png")
        self.assertTrue(result.startswith("https://placeholderads"))

    def test_upload_error_propagates(self):
        uploader = MagicMock()
        uploader.upload.side_effect = UploadError("S3 upload failed: boom")
        with self.assertRaises(UploadError):
            create_s3_upload_tool(uploader)(dallEImageUrl="https://images.example.com/a.png")

    def test_rejects_non_url(self):
        with self.assertRaises(ValidationError):
            create_s3_upload_tool(MagicMock())(dallEImageUrl="not a url")


class TestImageGeneration(unittest.TestCase):
    def test_generate_returns_first_url(self):
        client = MagicMock()
        client.images.generate.return_value.data = [MagicMock(url="https://images.example.com/gen.png")]
        generator = ImageGenerator("sk", client=client)

        tool = create_image_generation_tool(generator)
        self.assertEqual(tool(prompt="a sneaker"), "https://images.example.com/gen.png")
        client.images.generate.assert_called_once_with(
            model="dall-e-3", prompt="a sneaker", n=1, size="1024x1024"
        )


class TestWalletTools(unittest.TestCase):
    def setUp(self):
        self.wallet = MagicMock()
        self.wallet.address = "0xAgent"
        self.tools = {t.name: t for t in create_wallet_tools(self.wallet)}

    def test_details(self):
        self.wallet.details.return_value = {"address": "0xAgent", "network_id": "base-sepolia", "chain_id": 84532}
        self.assertEqual(json.loads(self.tools["get_wallet_details"]())["address"], "0xAgent")

    def test_balance(self):
        self.wallet.get_balance.return_value = Decimal("0.25")
        self.assertEqual(self.tools["get_balance"](), "Balance of 0xAgent: 0.25 ETH")

    def test_balance_failure_is_text(self):
        self.wallet.get_balance.side_effect = ConnectionError("rpc down")
        self.assertIn("rpc down", self.tools["get_balance"]())

    def test_transfer(self):
        self.wallet.transfer.return_value.wait.return_value = {"transactionHash": bytes.fromhex("beef")}
        result = self.tools["transfer"](to="0xFriend", amount="0.01")
        self.wallet.transfer.assert_called_once_with("0xFriend", Decimal("0.01"))
        self.assertIn("0xbeef", result)

    def test_transfer_failure_is_text(self):
        self.wallet.transfer.side_effect = ValueError("insufficient funds")
        result = self.tools["transfer"](to="0xFriend", amount="1")
        self.assertIn("insufficient funds", result)

    def test_transfer_rejects_non_positive_amount(self):
        with self.assertRaises(ValidationError):
            self.tools["transfer"](to="0xFriend", amount="0")


if __name__ == "__main__":
    unittest.main()
