"""
End-to-end tests for the nexusconvert command line.
"""

import pytest

from nexusconvert.cli import (
    build_overrides, main, nexus2fasta, nexus2mega, nexus2phylip, reformat_nexus, setup_argument_parser,
)
from nexusconvert.core.parser import NexusAlignmentParser
from nexusconvert.core.transforms import reverse_complement


class TestArgumentParser:
    """Test option parsing."""

    def test_unset_options_are_not_overrides(self):
        args = setup_argument_parser().parse_args(["fasta", "-i", "a.nex"])

        assert build_overrides(args) == {'input_output': {'input_file': "a.nex"}}

    def test_conversion_overrides(self):
        args = setup_argument_parser().parse_args(
            ["phylip", "-s", "-f", "seq", "-d", "out,ref", "--revcom", "--substr", "1:5", "-w", "10", "-c", "-n"])

        assert build_overrides(args) == {
            'selection': {'split': True, 'fetch': "seq", 'drop': "out,ref"},
            'transform': {
                'reverse_complement': True, 'substring': "1:5", 'wrap_width': 10,
                'header_fix': True, 'header_dash_strip': True,
            },
        }

    def test_command_required(self):
        with pytest.raises(SystemExit):
            setup_argument_parser().parse_args([])


class TestConversionCommands:
    """Test the conversion subcommands."""

    def test_fasta_to_stdout(self, nexus_file, capsys):
        main(["fasta", "-i", str(nexus_file)])

        assert capsys.readouterr().out == (
            ">seqA\nACGTACGTACGTACGTACGT\n"
            ">seqB\nACGTTGCAACGTTGCA\n"
            ">outgroup1\nTTTTACGTACGTACGTAAAA\n"
        )

    def test_fasta_labels_drop_placeholder(self, temp_dir, capsys):
        path = temp_dir / "legacy.nex"
        path.write_text("MATRIX\nxxx_seqA  ACGTACGT\n;\nEND;\n")

        main(["fasta", "-i", str(path)])

        assert capsys.readouterr().out == ">seqA\nACGTACGT\n"

    def test_drop_matches_dash_stripped_labels(self, temp_dir, capsys):
        path = temp_dir / "versions.nex"
        path.write_text("MATRIX\nseqA  ACGTAC\nseq-B.1  ACGTAC\n;\nEND;\n")

        main(["fasta", "-i", str(path), "-n", "-d", "seqB1"])

        assert capsys.readouterr().out == ">seqA\nACGTAC\n"

    def test_phylip_subset(self, nexus_file, temp_dir):
        output = temp_dir / "out.phy"

        main(["phylip", "-i", str(nexus_file), "-o", str(output), "-f", "seq"])

        lines = (temp_dir / "out.phy.subset.phylip").read_text().splitlines()
        assert lines[0] == "2 20"
        assert lines[2].endswith("ACGTTGCAACGTTGCA----")
        assert not output.exists()

    def test_mega_split_with_substring(self, nexus_file, temp_dir):
        main(["mega", "-i", str(nexus_file), "-o", str(temp_dir / "all.mega"),
              "-s", "--substr", "4:1", "-w", "2", "--quiet"])

        text = (temp_dir / "seqA.mega").read_text()
        assert text == "#mega\n!Title seqA;\n!Format DataType=DNA indel=-;\n\n#seqA\nAC\nGT\n\n"
        assert (temp_dir / "outgroup1.mega").exists()

    def test_nexus_round_trip_with_drop(self, nexus_file, temp_dir, sample_sequences):
        output = temp_dir / "clean.nex"

        main(["nexus", "-i", str(nexus_file), "-o", str(output), "-d", "outgroup", "--revcom"])

        alignment, _, _ = NexusAlignmentParser().parse(output.read_text())
        assert alignment.labels() == ["seqA", "seqB"]
        assert alignment.get("seqA") == reverse_complement(sample_sequences["seqA"])
        assert alignment.format.datatype == "DNA"

    def test_config_file_with_override(self, nexus_file, temp_dir, capsys):
        config = temp_dir / "config.yaml"
        config.write_text(f"input_output:\n  input_file: {nexus_file}\nselection:\n  fetch: seqA\n")

        main(["fasta", "--config", str(config), "-f", "seqB"])

        assert capsys.readouterr().out == ">seqB\nACGTTGCAACGTTGCA\n"

    def test_invalid_substring_exits(self, nexus_file):
        with pytest.raises(SystemExit) as exc_info:
            main(["fasta", "-i", str(nexus_file), "--substr", "0:4"])

        assert exc_info.value.code == 1

    def test_missing_input_exits(self, temp_dir):
        with pytest.raises(SystemExit) as exc_info:
            main(["fasta", "-i", str(temp_dir / "missing.nex")])

        assert exc_info.value.code == 1

    def test_malformed_input_exits(self, temp_dir, caplog):
        path = temp_dir / "bad.nex"
        path.write_text("MATRIX\nseqA ACGT\nEND;\n")

        with pytest.raises(SystemExit):
            main(["fasta", "-i", str(path)])

        assert "fasta failed" in caplog.text

    def test_unopenable_output_exits(self, nexus_file, temp_dir):
        with pytest.raises(SystemExit) as exc_info:
            main(["fasta", "-i", str(nexus_file), "-o", str(temp_dir / "no" / "out.fasta")])

        assert exc_info.value.code == 1

    def test_debug_log(self, nexus_file, temp_dir, monkeypatch, capsys):
        monkeypatch.chdir(temp_dir)

        main(["fasta", "-i", str(nexus_file), "--debug"])

        assert (temp_dir / "nexusconvert_debug.log").exists()


class TestShortcuts:
    """Test the console-script shortcuts."""

    def test_nexus2fasta(self, nexus_file, capsys):
        nexus2fasta(["-i", str(nexus_file), "-f", "out"])

        assert capsys.readouterr().out == ">outgroup1\nTTTTACGTACGTACGTAAAA\n"

    def test_nexus2phylip(self, nexus_file, capsys):
        nexus2phylip(["-i", str(nexus_file)])

        assert capsys.readouterr().out.startswith("3 20\n")

    def test_nexus2mega(self, nexus_file, capsys):
        nexus2mega(["-i", str(nexus_file)])

        assert capsys.readouterr().out.startswith("#mega\n!Title stdout;\n")

    def test_reformat_nexus(self, nexus_file, capsys):
        reformat_nexus(["-i", str(nexus_file), "-c"])

        assert capsys.readouterr().out.startswith("#NEXUS\n[written ")


class TestAppendCommands:
    """Test the block appender subcommands."""

    def test_append_trees(self, nexus_file, temp_dir, sample_tree, sample_nexus_alignment):
        tree_file = temp_dir / "t1.tre"
        tree_file.write_text(sample_tree + "\n")
        output = temp_dir / "with_trees.nex"

        main(["append-trees", "-i", str(nexus_file), "-o", str(output), "-u", "unrooted", str(tree_file)])

        text = output.read_text()
        assert text.startswith(sample_nexus_alignment)
        assert f"\ttree 1 = [&U] {sample_tree}\n" in text
        assert text.endswith("\t[ntrees=1]\nEND;\n\n")

    def test_append_trees_missing_file(self, nexus_file, temp_dir):
        with pytest.raises(SystemExit):
            main(["append-trees", "-i", str(nexus_file), str(temp_dir / "missing.tre")])

    def test_append_paup(self, nexus_file, capsys):
        main(["append-paup", "-i", str(nexus_file), "-l", "paup.log", "-g", "outgroup1", "-r", "10"])

        out = capsys.readouterr().out
        assert "BEGIN PAUP;\n\tlog start replace file = paup.log;" in out
        assert "\toutgroup outgroup1;\n" in out
        assert "nreps = 10 " in out

    def test_append_paup_no_quit(self, nexus_file, capsys):
        main(["append-paup", "-i", str(nexus_file), "-l", "paup.log", "-m", "likelihood",
              "-s", "bootstrap", "--no-quit"])

        out = capsys.readouterr().out
        assert "paup_MLboot_tree.tre" in out
        assert "\tquit;" not in out

    def test_append_mrbayes_with_tree(self, nexus_file, capsys):
        main(["append-mrbayes", "-i", str(nexus_file), "-l", "mb.log", "-n", "2000", "-t"])

        out = capsys.readouterr().out
        assert "\tstartvals tau = 1 V = 1;\n" in out
        assert "\tmcmc ngen = 2000 " in out

    def test_append_mrbayes_without_tree(self, temp_dir, capsys, caplog):
        path = temp_dir / "plain.nex"
        path.write_text("#NEXUS\n")

        main(["append-mrbayes", "-i", str(path), "-l", "mb.log", "-t"])

        assert "startvals" not in capsys.readouterr().out
        assert "No tree definition found" in caplog.text


class TestGenerateConfig:
    """Test template generation."""

    def test_yaml(self, temp_dir):
        path = temp_dir / "nexusconvert.yaml"

        main(["generate-config", str(path)])

        assert "input_output:" in path.read_text()

    def test_toml(self, temp_dir):
        path = temp_dir / "nexusconvert.toml"

        main(["generate-config", str(path)])

        assert "[input_output]" in path.read_text()
