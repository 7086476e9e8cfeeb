"""Unit tests for AnalysisEngine."""
import sys
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

import pytest
from unittest.mock import Mock
from models.document import CorpusPage, Document
from services.analysis_engine import AnalysisEngine
from services.corpus import InMemoryCorpus
from services.errors import CorpusUnavailable, InvalidKeyword, InvalidPage, InvalidRequest


def make_records(count):
    return [
        {"id": i, "title": f"Post {i}", "content": f"<p>post number {i} about testing</p>"}
        for i in range(1, count + 1)
    ]


class TestAnalysisEngine:
    """Test suite for AnalysisEngine."""

    @pytest.fixture
    def engine(self):
        """Engine over a 25-post corpus."""
        return AnalysisEngine(InMemoryCorpus(make_records(25), site_url="https://blog.example"))

    def test_reference_scenario(self):
        """One post "This is a test of testing": 6 words, 2 occurrences, 33.33%."""
        corpus = InMemoryCorpus([
            {"id": 7, "title": "Testing", "content": "This is a test of testing",
             "permalink": "https://blog.example/testing"}
        ])
        engine = AnalysisEngine(corpus)

        result = engine.analyze("test", page=1, per_page=10)

        assert result.total == 1
        assert result.pages == 1
        assert len(result.posts) == 1
        post = result.posts[0]
        assert post.id == 7
        assert post.title == "Testing"
        assert post.word_count == 6
        assert post.keyword_density == 33.33
        assert post.url == "https://blog.example/testing"

    def test_pages_is_ceil_of_total(self, engine):
        result = engine.analyze("post", page=1, per_page=10)

        assert result.total == 25
        assert result.pages == 3
        assert len(result.posts) == 10

    def test_last_page_window(self, engine):
        result = engine.analyze("post", page=3, per_page=10)

        assert [post.id for post in result.posts] == [21, 22, 23, 24, 25]

    def test_page_past_end_keeps_totals(self, engine):
        result = engine.analyze("post", page=9, per_page=10)

        assert result.posts == []
        assert result.total == 25
        assert result.pages == 3

    def test_total_independent_of_keyword(self, engine):
        matching = engine.analyze("post", page=1, per_page=5)
        missing = engine.analyze("zebra", page=1, per_page=5)

        assert matching.total == missing.total == 25
        assert all(post.keyword_density == 0 for post in missing.posts)

    def test_empty_corpus(self):
        engine = AnalysisEngine(InMemoryCorpus([]))

        result = engine.analyze("test", page=1, per_page=10)

        assert result.posts == []
        assert result.total == 0
        assert result.pages == 0

    def test_posts_keep_corpus_order(self, engine):
        result = engine.analyze("post", page=1, per_page=5)

        assert [post.id for post in result.posts] == [1, 2, 3, 4, 5]

    def test_generated_permalink(self, engine):
        result = engine.analyze("post", page=1, per_page=1)

        assert result.posts[0].url == "https://blog.example/?p=1"

    def test_density_bounds_hold_for_every_post(self):
        corpus = InMemoryCorpus([
            {"id": 1, "title": "Empty", "content": ""},
            {"id": 2, "title": "Markup only", "content": "<div><br/></div>"},
            {"id": 3, "title": "Banana", "content": "banana"},
            {"id": 4, "title": "Normal", "content": "a plain sentence with an a in it"},
        ])
        engine = AnalysisEngine(corpus)

        result = engine.analyze("a", page=1, per_page=10)

        for post in result.posts:
            assert 0 <= post.keyword_density <= 100
            assert round(post.keyword_density, 2) == post.keyword_density
            if post.word_count == 0:
                assert post.keyword_density == 0

        banana = next(post for post in result.posts if post.id == 3)
        assert banana.word_count == 1
        assert banana.keyword_density == 100.0

    def test_markup_is_stripped_before_counting(self):
        corpus = InMemoryCorpus([
            {"id": 1, "title": "Styled", "content": "<p class=\"test\">one <em>test</em></p><script>test()</script>"}
        ])
        engine = AnalysisEngine(corpus)

        post = engine.analyze("test", page=1, per_page=10).posts[0]

        assert post.word_count == 2
        assert post.keyword_density == 50.0

    def test_word_match_mode(self):
        corpus = InMemoryCorpus([{"id": 1, "title": "T", "content": "This is a test of testing"}])

        substring = AnalysisEngine(corpus).analyze("test", page=1, per_page=10).posts[0]
        word = AnalysisEngine(corpus, match_mode="word").analyze("test", page=1, per_page=10).posts[0]
        per_call = AnalysisEngine(corpus).analyze("test", page=1, per_page=10, match_mode="word").posts[0]

        assert substring.keyword_density == 33.33
        assert word.keyword_density == 16.67
        assert per_call.keyword_density == 16.67

    def test_keyword_is_sanitized(self, engine):
        result = engine.analyze("  <b>testing</b>\n", page=1, per_page=1)

        assert result.posts[0].keyword_density == 20.0

    @pytest.mark.parametrize("keyword", [None, "", "   ", "\t\n", "<b></b>"])
    def test_empty_keyword_rejected(self, engine, keyword):
        with pytest.raises(InvalidKeyword, match="Keyword is required"):
            engine.analyze(keyword, page=1, per_page=10)

    def test_empty_keyword_never_touches_corpus(self):
        corpus = Mock()
        engine = AnalysisEngine(corpus)

        with pytest.raises(InvalidKeyword):
            engine.analyze("", page=1, per_page=10)

        corpus.fetch_page.assert_not_called()

    @pytest.mark.parametrize("page,per_page", [(0, 10), (-1, 10), (1, 0), (1, 101)])
    def test_invalid_paging_rejected(self, engine, page, per_page):
        with pytest.raises(InvalidPage):
            engine.analyze("test", page=page, per_page=per_page)

    def test_invalid_match_mode(self, engine):
        with pytest.raises(InvalidRequest, match="match must be one of"):
            engine.analyze("test", page=1, per_page=10, match_mode="fuzzy")

        with pytest.raises(ValueError):
            AnalysisEngine(InMemoryCorpus([]), match_mode="fuzzy")

    def test_corpus_failure_becomes_corpus_unavailable(self):
        corpus = Mock()
        corpus.fetch_page.side_effect = RuntimeError("connection refused")
        engine = AnalysisEngine(corpus)

        with pytest.raises(CorpusUnavailable, match="Unable to load posts"):
            engine.analyze("test", page=1, per_page=10)

    def test_corpus_unavailable_passes_through(self):
        corpus = Mock()
        corpus.fetch_page.side_effect = CorpusUnavailable("Corpus file could not be loaded")
        engine = AnalysisEngine(corpus)

        with pytest.raises(CorpusUnavailable, match="Corpus file could not be loaded"):
            engine.analyze("test", page=1, per_page=10)

    def test_requests_the_page_window(self):
        corpus = Mock()
        corpus.fetch_page.return_value = CorpusPage(
            documents=[Document(id="a", title="A", body="one two", permalink="https://x/a")],
            total=41
        )
        engine = AnalysisEngine(corpus)

        result = engine.analyze("one", page=4, per_page=10)

        corpus.fetch_page.assert_called_once_with(4, 10)
        assert result.pages == 5
        assert result.posts[0].keyword_density == 50.0
