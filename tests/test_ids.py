"""Tests for identifiers and URL helpers."""

from signalforge.data import RunRequest
from signalforge.ids import build_run_id, normalize_query, short_hash, slugify
from signalforge.url import extract_host


def test_short_hash_is_fixed_width_and_stable() -> None:
    assert len(short_hash("anything")) == 10
    assert short_hash("anything") == short_hash("anything")
    assert short_hash("anything") != short_hash("something")
    assert len(short_hash("anything", 8)) == 8


def test_slugify() -> None:
    assert slugify("Rust Async: What's New?") == "rust-async-what-s-new"
    assert slugify("!!!") == "run"
    assert len(slugify("word " * 30)) <= 40


def test_normalize_query() -> None:
    assert normalize_query("  Rust   ASYNC ") == "rust async"


def test_run_id_format() -> None:
    run_id = build_run_id(RunRequest(query="Rust async"), "2024-02-10")
    assert run_id.startswith("2024-02-10-rust-async-")
    assert len(run_id.rsplit("-", 1)[-1]) == 8


def test_identical_requests_share_run_id() -> None:
    a = build_run_id(RunRequest(query="Rust async", sources=["hn", "reddit"]), "2024-02-10")
    b = build_run_id(RunRequest(query="  rust   ASYNC", sources=["reddit", "hn"]), "2024-02-10")
    assert a == b


def test_options_change_run_id() -> None:
    base = build_run_id(RunRequest(query="rust"), "2024-02-10")
    assert build_run_id(RunRequest(query="rust", window_days=7), "2024-02-10") != base
    assert build_run_id(RunRequest(query="rust"), "2024-02-11") != base


def test_nondeterministic_requests_differ() -> None:
    request = RunRequest(query="rust", deterministic=False)
    assert build_run_id(request, "2024-02-10") != build_run_id(request, "2024-02-10")


def test_explicit_nonce_is_reproducible() -> None:
    request = RunRequest(query="rust", deterministic=False)
    assert build_run_id(request, "2024-02-10", nonce="abc") == build_run_id(
        request, "2024-02-10", nonce="abc"
    )


def test_extract_host() -> None:
    assert extract_host("https://www.Example.com/path?q=1") == "www.example.com"
    assert extract_host("not a url") == "not a url"
