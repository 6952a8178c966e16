"""
Pytest configuration and shared fixtures.

This module contains shared test fixtures and configuration
for the nexusconvert test suite.
"""

import pytest
import tempfile
import shutil
import logging
from pathlib import Path

# Configure logging for tests
logging.basicConfig(level=logging.DEBUG)

# Raw MATRIX rows: seqB is lowercase and gapped to exercise normalization
RAW_SEQUENCES = {
    'seqA': 'ACGTACGTACGTACGTACGT',
    'seqB': 'acgt--TGCAACGTTGCA',
    'outgroup1': 'TTTTACGTACGTACGTAAAA',
}


@pytest.fixture
def temp_dir():
    """Create a temporary directory for each test."""
    temp_path = Path(tempfile.mkdtemp())
    yield temp_path
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def raw_sequences():
    """MATRIX rows as they appear in the sample NEXUS file."""
    return dict(RAW_SEQUENCES)


@pytest.fixture
def sample_sequences():
    """Sequences as the parser returns them (uppercase, gaps removed)."""
    return {
        'seqA': 'ACGTACGTACGTACGTACGT',
        'seqB': 'ACGTTGCAACGTTGCA',
        'outgroup1': 'TTTTACGTACGTACGTAAAA',
    }


@pytest.fixture
def sample_nexus_alignment(raw_sequences):
    """Create a sample NEXUS document with a trailing TREES block."""
    content = """#NEXUS

BEGIN DATA;
DIMENSIONS NTAX=3 NCHAR=20;
FORMAT DATATYPE = DNA GAP = - MISSING = ? Interleave = no;
MATRIX
"""
    for seq_name, sequence in raw_sequences.items():
        content += f"{seq_name:<12}{sequence}\n"

    content += """;
END;

BEGIN TREES;
\ttree 1 = (seqA,(seqB,outgroup1));
END;
"""
    return content


@pytest.fixture
def nexus_file(temp_dir, sample_nexus_alignment):
    """The sample NEXUS document written to disk."""
    return create_test_file(temp_dir, "alignment.nex", sample_nexus_alignment)


@pytest.fixture
def sample_tree():
    """Provide a sample phylogenetic tree."""
    return "(seqA:0.1,(seqB:0.1,outgroup1:0.3):0.05);"


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo logger levels and handlers installed by CLI runs."""
    yield
    package_logger = logging.getLogger("nexusconvert")
    package_logger.setLevel(logging.NOTSET)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()


@pytest.fixture
def caplog_debug(caplog):
    """Capture debug logs during tests."""
    with caplog.at_level(logging.DEBUG):
        yield caplog


def create_test_file(temp_dir: Path, filename: str, content: str) -> Path:
    """Helper function to create test files."""
    file_path = temp_dir / filename
    file_path.write_text(content)
    return file_path


def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )


def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers based on test names."""
    for item in items:
        if "cli" in item.nodeid:
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)
