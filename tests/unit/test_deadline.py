"""
Extraction Deadline Tests
"""
from doctext.extractor.deadline import Deadline


class TestDeadline:
    """Test the per-call time budget"""

    def test_base_budget(self):
        deadline = Deadline(10, 5, 30)
        assert not deadline.expired()
        assert 9 < deadline.remaining() <= 10

    def test_grows_with_page_count(self):
        """Should allow base plus per-page seconds"""
        deadline = Deadline(10, 5, 30)
        deadline.allow_pages(2)
        assert 19 < deadline.remaining() <= 20

    def test_capped_at_maximum(self):
        deadline = Deadline(10, 5, 30)
        deadline.allow_pages(100)
        assert 29 < deadline.remaining() <= 30

    def test_repeated_passes_do_not_compound(self):
        """Should compute the budget from the base on every call"""
        deadline = Deadline(10, 5, 300)
        deadline.allow_pages(2)
        deadline.allow_pages(2)
        deadline.allow_pages(2)
        assert deadline.remaining() <= 20

    def test_never_shrinks(self):
        deadline = Deadline(10, 5, 30)
        deadline.allow_pages(3)
        deadline.allow_pages(0)
        assert deadline.remaining() > 20

    def test_zero_budget_is_expired(self):
        deadline = Deadline(0, 0, 0)
        deadline.allow_pages(5)
        assert deadline.expired()
        assert deadline.remaining() == 0.0
