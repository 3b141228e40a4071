import unittest

from app.core.logging_safety import safe_log_identifier, transcript_word_count


class SafeLogIdentifierTests(unittest.TestCase):
    def test_identifier_is_deterministic_and_hides_value(self) -> None:
        first = safe_log_identifier("req_abc123", prefix="cid")
        second = safe_log_identifier("req_abc123", prefix="cid")

        self.assertEqual(first, second)
        self.assertTrue(first.startswith("cid-"))
        self.assertNotIn("req_abc123", first)
        self.assertEqual(len(first), len("cid-") + 12)

    def test_blank_values_are_marked_missing(self) -> None:
        for value in (None, "", "   "):
            with self.subTest(value=value):
                self.assertEqual(safe_log_identifier(value, prefix="file"), "file-missing")


class TranscriptWordCountTests(unittest.TestCase):
    def test_prefers_word_list(self) -> None:
        transcription = {"text": "one two three", "words": [{"text": "one"}, {"text": "two"}]}
        self.assertEqual(transcript_word_count(transcription), 2)

    def test_falls_back_to_text(self) -> None:
        self.assertEqual(transcript_word_count({"text": "hello there world"}), 3)

    def test_non_transcript_values_count_zero(self) -> None:
        for value in (None, "text", {"text": 5}, {}):
            with self.subTest(value=value):
                self.assertEqual(transcript_word_count(value), 0)


if __name__ == "__main__":
    unittest.main()
