from unittest.mock import patch

from src.app.verification import CODE_LENGTH, CodeGenerator, parse_code


def test_generated_codes_are_six_digits():
    generator = CodeGenerator()
    for _ in range(200):
        code = generator.generate()
        assert len(code) == CODE_LENGTH
        assert code.isdigit()


def test_small_values_keep_leading_zeros():
    with patch("src.app.verification.code_generator.secrets.randbelow", return_value=42):
        assert CodeGenerator().generate() == "000042"


def test_generator_draws_from_full_range():
    with patch(
        "src.app.verification.code_generator.secrets.randbelow", return_value=0
    ) as randbelow:
        CodeGenerator().generate()
    randbelow.assert_called_once_with(1_000_000)


def test_parse_code_trims_whitespace():
    result = parse_code("  123456 ")
    assert result.is_ok()
    assert result.value == "123456"


def test_parse_code_rejects_wrong_length():
    for code in ["12345", "1234567", "", "   "]:
        result = parse_code(code)
        assert result.is_err()
        assert result.error.code == "INVALID_CODE_FORMAT"


def test_parse_code_rejects_non_digits():
    for code in ["12a456", "12 456", "١٢٣٤٥٦", "-12345"]:
        result = parse_code(code)
        assert result.is_err()
        assert result.error.code == "INVALID_CODE_FORMAT"


def test_parse_code_handles_none():
    assert parse_code(None).error.code == "INVALID_CODE_FORMAT"
