import httpx
import pytest

from listing.errors import ModelNotInstalledError, ServiceUnavailableError, UpstreamError
from listing.generator import CloudGenerator, LocalGenerator, UnconfiguredGenerator
from listing.markup import outline_markup
from listing.models import (
    Backend,
    CategorizedFeatures,
    CustomizationOptions,
    FeatureBundle,
    FeatureSource,
    OutputFormat,
)
from listing.prompts import FURNITURE_POLICY
from listing.providers.ollama_client import OllamaVisionClient
from listing.providers.openai_client import OpenAIChatClient

HTML_DESCRIPTION = """```html
<p>Welcome home to light-filled living.</p>
<h3>Interior Features</h3>
<ul>
<li>Hardwood floors throughout</li>
<li>Granite countertops</li>
</ul>
<h3>Location Benefits</h3>
<ul><li>Steps from the park</li></ul>
<p>Schedule your showing today.</p>
```"""


class DummyChat:
    model = "gpt-test"

    def __init__(self, replies=None, error=None):
        self.replies = list(replies or [])
        self.error = error
        self.calls = []

    async def complete(self, system: str, prompt: str) -> str:
        self.calls.append((system, prompt))
        if self.error:
            raise self.error
        return self.replies.pop(0)


class DummyOllama:
    model = "llava:latest"

    def __init__(self, replies=None, available=True, installed=True, error=None):
        self.replies = list(replies or [])
        self.available = available
        self.installed = installed
        self.error = error
        self.calls = []

    async def is_available(self) -> bool:
        return self.available

    async def has_model(self, model=None) -> bool:
        return self.installed

    async def generate(self, prompt: str, images=()) -> str:
        self.calls.append((prompt, list(images)))
        if self.error:
            raise self.error
        return self.replies.pop(0)


def _bundle(**overrides):
    values = dict(
        features=["Kitchen", "Hardwood", "Property"],
        detected_text="OPEN HOUSE",
        images=[b"img-1", b"img-2"],
        categorized=CategorizedFeatures(structural=["Kitchen"], materials=["Hardwood"]),
    )
    values.update(overrides)
    return FeatureBundle(**values)


@pytest.mark.asyncio
async def test_cloud_generator_uses_user_features_without_feature_call():
    chat = DummyChat(replies=["A charming home."])
    generator = CloudGenerator(chat)
    options = CustomizationOptions(
        backend=Backend.OPENAI, features="Pool, three-car garage", output_format=OutputFormat.TEXT
    )

    result = await generator.generate(_bundle(), options)

    assert len(chat.calls) == 1
    assert "Pool, three-car garage" in chat.calls[0][1]
    assert FURNITURE_POLICY in chat.calls[0][1]
    assert result.description == "A charming home."
    assert result.used_features == "Pool, three-car garage"
    assert result.feature_source is FeatureSource.USER


@pytest.mark.asyncio
async def test_cloud_generator_curates_detected_features_first():
    chat = DummyChat(replies=["Eat-in kitchen, hardwood flooring", "A charming home."])
    generator = CloudGenerator(chat)
    options = CustomizationOptions(backend=Backend.OPENAI, output_format=OutputFormat.TEXT)

    result = await generator.generate(_bundle(), options)

    assert len(chat.calls) == 2
    feature_prompt = chat.calls[0][1]
    assert "Layout and rooms: Kitchen" in feature_prompt
    assert "Materials and finishes: Hardwood" in feature_prompt
    description_prompt = chat.calls[1][1]
    assert "Eat-in kitchen, hardwood flooring" in description_prompt
    assert "OPEN HOUSE" in description_prompt
    assert result.used_features == "Eat-in kitchen, hardwood flooring"
    assert result.feature_source is FeatureSource.DETECTED


@pytest.mark.asyncio
async def test_cloud_generator_falls_back_to_raw_features_when_curation_is_empty():
    chat = DummyChat(replies=["", "Description."])
    generator = CloudGenerator(chat)

    result = await generator.generate(_bundle(), CustomizationOptions(backend=Backend.OPENAI))

    assert result.used_features == "Kitchen, Hardwood, Property"


@pytest.mark.asyncio
async def test_cloud_generator_wraps_http_errors():
    chat = DummyChat(error=httpx.ConnectError("unreachable"))
    generator = CloudGenerator(chat)

    with pytest.raises(UpstreamError) as excinfo:
        await generator.generate(_bundle(), CustomizationOptions(backend=Backend.OPENAI))

    assert "OpenAI" in excinfo.value.message
    assert excinfo.value.kind.value == "upstream-error"


@pytest.mark.asyncio
async def test_cloud_generator_rejects_empty_description():
    chat = DummyChat(replies=["```\n```"])
    generator = CloudGenerator(chat)
    options = CustomizationOptions(backend=Backend.OPENAI, features="Pool")

    with pytest.raises(UpstreamError):
        await generator.generate(_bundle(), options)


@pytest.mark.asyncio
async def test_cloud_generator_html_output_is_cleaned_and_structured():
    chat = DummyChat(replies=[HTML_DESCRIPTION])
    generator = CloudGenerator(chat)
    options = CustomizationOptions(backend=Backend.OPENAI, features="Hardwood floors")

    result = await generator.generate(_bundle(), options)

    assert result.description.startswith("<p>Welcome home")
    assert "```" not in result.description
    outline = outline_markup(result.description)
    assert outline.headings == ["Interior Features", "Location Benefits"]
    assert outline.list_items == ["Hardwood floors throughout", "Granite countertops", "Steps from the park"]
    assert outline.is_structured


@pytest.mark.asyncio
async def test_unconfigured_generator_reports_unavailable():
    generator = UnconfiguredGenerator(Backend.OPENAI, "OpenAI service is not configured.")

    with pytest.raises(ServiceUnavailableError) as excinfo:
        await generator.generate(_bundle(), CustomizationOptions(backend=Backend.OPENAI))

    assert excinfo.value.message == "OpenAI service is not configured."
    assert excinfo.value.kind.value == "upstream-unavailable"


@pytest.mark.asyncio
async def test_local_generator_requires_running_service():
    client = DummyOllama(available=False)
    generator = LocalGenerator(client, host="http://localhost:11434")

    with pytest.raises(ServiceUnavailableError) as excinfo:
        await generator.generate(_bundle(), CustomizationOptions())

    assert "http://localhost:11434" in excinfo.value.message
    assert client.calls == []


@pytest.mark.asyncio
async def test_local_generator_requires_installed_model():
    client = DummyOllama(installed=False)
    generator = LocalGenerator(client)

    with pytest.raises(ModelNotInstalledError) as excinfo:
        await generator.generate(_bundle(), CustomizationOptions())

    assert "llava:latest" in excinfo.value.message
    assert "ollama pull llava:latest" in excinfo.value.message
    assert excinfo.value.kind.value == "model-missing"
    assert client.calls == []


@pytest.mark.asyncio
async def test_local_generator_with_user_features_makes_one_call_with_images():
    client = DummyOllama(replies=["Lovely bungalow."])
    generator = LocalGenerator(client)
    options = CustomizationOptions(features="Wraparound porch", output_format=OutputFormat.TEXT)

    result = await generator.generate(_bundle(), options)

    assert len(client.calls) == 1
    prompt, images = client.calls[0]
    assert "Wraparound porch" in prompt
    assert FURNITURE_POLICY in prompt
    assert images == [b"img-1", b"img-2"]
    assert result.feature_source is FeatureSource.USER
    assert result.description == "Lovely bungalow."


@pytest.mark.asyncio
async def test_local_generator_detects_features_from_images():
    client = DummyOllama(replies=["- Bay window\n- Brick fireplace", "Lovely bungalow."])
    generator = LocalGenerator(client)

    result = await generator.generate(_bundle(), CustomizationOptions(output_format=OutputFormat.TEXT))

    assert len(client.calls) == 2
    assert "DO NOT include specific furniture" in client.calls[0][0]
    assert "Bay window, Brick fireplace" in client.calls[1][0]
    assert result.used_features == "Bay window, Brick fireplace"
    assert result.feature_source is FeatureSource.DETECTED


@pytest.mark.asyncio
async def test_local_generator_wraps_http_errors():
    client = DummyOllama(error=httpx.ReadTimeout("slow"))
    generator = LocalGenerator(client)

    with pytest.raises(UpstreamError):
        await generator.generate(_bundle(), CustomizationOptions(features="Pool"))


@pytest.mark.asyncio
async def test_cloud_generator_non_json_reply_is_upstream_error():
    client = OpenAIChatClient(
        api_key="sk-test",
        transport=httpx.MockTransport(lambda request: httpx.Response(200, text="<html>gateway</html>")),
    )
    generator = CloudGenerator(client)

    with pytest.raises(UpstreamError) as excinfo:
        await generator.generate(_bundle(), CustomizationOptions(backend=Backend.OPENAI, features="Pool"))

    assert excinfo.value.kind.value == "upstream-error"


@pytest.mark.asyncio
async def test_local_generator_non_object_reply_is_upstream_error():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/api/tags":
            return httpx.Response(200, json={"models": [{"name": "llava:latest"}]})
        return httpx.Response(200, json=["unexpected"])

    client = OllamaVisionClient(
        base_url="http://ollama.test",
        model="llava:latest",
        transport=httpx.MockTransport(handler),
    )
    generator = LocalGenerator(client)

    with pytest.raises(UpstreamError):
        await generator.generate(_bundle(), CustomizationOptions(features="Pool"))


@pytest.mark.asyncio
async def test_combined_reply_keeps_only_description():
    client = DummyOllama(
        replies=["FEATURES: Bay window, Brick fireplace\n\nDESCRIPTION: Lovely bungalow with character."]
    )
    generator = LocalGenerator(client)
    options = CustomizationOptions(features="Bay window", output_format=OutputFormat.TEXT)

    result = await generator.generate(_bundle(), options)

    assert result.description == "Lovely bungalow with character."
    assert "FEATURES" not in result.description
