import re

from cardulary.guests.tokens import generate_guest_token, get_submission_url


def test_token_is_64_hex_characters():
    token = generate_guest_token()

    assert re.fullmatch(r"[0-9a-f]{64}", token)


def test_tokens_do_not_collide():
    tokens = {generate_guest_token() for _ in range(10_000)}

    assert len(tokens) == 10_000


def test_submission_url_uses_base_url():
    assert get_submission_url("abc", base_url="https://cardulary.app/") == (
        "https://cardulary.app/submit/abc"
    )
