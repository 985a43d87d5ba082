import os
import pytest
from bigram_segmenter import BigramSegmenter

DATA_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'data'))


@pytest.fixture
def data_dir():
    return DATA_DIR


@pytest.fixture(scope="session")
def small_segmenter():
    return BigramSegmenter.from_model(DATA_DIR, "small", 20)


@pytest.fixture(scope="session")
def test_bigram_segmenter():
    return BigramSegmenter.from_model(DATA_DIR, "test_bigram", 20)


@pytest.fixture
def write_table(tmp_path):
    def _write(total, frequencies, name="table"):
        total_path = tmp_path / f"{name}_total.tsv"
        freq_path = tmp_path / f"{name}_frequencies.tsv"
        total_path.write_text(total, encoding="utf-8")
        freq_path.write_text(frequencies, encoding="utf-8")
        return str(total_path), str(freq_path)
    return _write
