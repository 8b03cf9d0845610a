import base64

from vision_relay.payload import Attachment, build_payload, encode_data_uri


def test_data_uri_decodes_to_original_bytes():
    data = bytes(range(256)) * 3
    uri = encode_data_uri(data, "image/jpeg")
    header, encoded = uri.split(",", 1)
    assert header == "data:image/jpeg;base64"
    assert base64.b64decode(encoded) == data


def test_data_uri_without_mime_type():
    assert encode_data_uri(b"abc", "") == "data:application/octet-stream;base64,YWJj"


def test_build_payload_shape():
    payload = build_payload(
        prompt="Read this",
        model="some/model",
        image=Attachment(data=b"img", mime_type="image/webp"),
        pdf=Attachment(data=b"pdf", mime_type="application/x-whatever"),
    ).model_dump()

    assert payload == {
        "model": "some/model",
        "messages": [
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": "Read this"},
                    {"type": "image_url", "image_url": "data:image/webp;base64,aW1n"},
                    {"type": "image_url", "image_url": "data:application/pdf;base64,cGRm"},
                ],
            }
        ],
    }


def test_build_payload_pdf_without_image():
    payload = build_payload(prompt="p", model="m", pdf=Attachment(data=b"pdf", mime_type="application/pdf"))
    content = payload.model_dump()["messages"][0]["content"]
    assert [block["type"] for block in content] == ["text", "image_url"]
    assert content[1]["image_url"].startswith("data:application/pdf;base64,")
