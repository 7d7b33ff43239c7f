"""Tests for output sanitizer: card, CVV and customer PII redaction."""
import json

from checkout_validator.output_sanitizer import (
    redact_card_number,
    redact_email,
    redact_phone_number,
    sanitize_output,
    summarize_checkout,
)
from checkout_validator.schema import CheckoutRequest


class TestRedactionHelpers:
    def test_card_keeps_length_and_last_four(self):
        assert redact_card_number("4111 1111 1111 1111") == "************1111"

    def test_amex_length_preserved(self):
        assert redact_card_number("378282246310005") == "***********0005"

    def test_card_of_four_digits_or_fewer_fully_masked(self):
        assert redact_card_number("12") == "**"

    def test_email_keeps_domain(self):
        assert redact_email("books@shop.example.org") == "b***@shop.example.org"

    def test_phone_keeps_last_four(self):
        assert redact_phone_number("4155550100") == "***-***-0100"

    def test_short_phone(self):
        assert redact_phone_number("12") == "***"


class TestSummarizeCheckout:
    def test_summary_hides_pii(self, checkout_payload, today):
        request = CheckoutRequest.model_validate(checkout_payload, context={"today": today})

        summary = summarize_checkout(request)

        assert summary["payment"] == {"brand": "Visa", "card": "************1111", "expires": "12/27"}
        assert "4111111111111111" not in str(summary)
        assert summary["customer"]["name"] == "Jane D."
        assert summary["customer"]["email"] == "j***@example.com"
        assert summary["customer"]["phone"] == "***-***-0100"
        assert summary["shipping"]["postal_code"] == "941**"
        assert "123 Main Street" not in str(summary)
        assert summary["total_quantity"] == 3
        assert summary["items"][0] == {"isbn": "9780306406157", "quantity": 2}


class TestSanitizeOutput:
    def test_redacts_card_numbers(self):
        text = "Charged card 5500 0000 0000 0004 for 2 books."
        result = sanitize_output(text)
        assert "0000 0000" not in result
        assert "[CARD REDACTED]" in result

    def test_redacts_card_inside_json(self, checkout_payload):
        result = sanitize_output(json.dumps(checkout_payload))
        assert "4111111111111111" not in result
        assert '"cardNumber": "[CARD REDACTED]"' in result

    def test_redacts_cvv_inside_json(self):
        result = sanitize_output('{"cardNumber": "x", "cvv": "123"}')
        assert '"cvv": "[CVV REDACTED]"' in result
        assert "123" not in result

    def test_keeps_digit_runs_that_are_not_cards(self):
        text = "ISBN 9780306406157, order 1234 5678 9012"
        assert sanitize_output(text) == text

    def test_strips_ansi(self):
        text = "\x1b[32mvalid\x1b[0m checkout"
        assert sanitize_output(text) == "valid checkout"

    def test_truncates_long_output(self):
        text = "y" * 5000
        result = sanitize_output(text, max_chars=100)
        assert result.startswith("y" * 100)
        assert result.endswith("[... truncated at 100 chars]")

    def test_passes_clean_text(self):
        text = "Book: Dune, Quantity: 2, Ships to: Portland, OR"
        assert sanitize_output(text) == text
