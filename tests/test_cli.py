from pathlib import Path

from typer.testing import CliRunner

from wordbits.cli import app

runner = CliRunner()


class TestCli:
    def _pack(self, path: Path, *args: str) -> None:
        result = runner.invoke(app, ["pack", str(path), *args])
        assert result.exit_code == 0, result.output

    def test_pack(self, tmp_path: Path) -> None:
        out = tmp_path / "packed.bin"
        result = runner.invoke(app, ["pack", str(out), "5", "3", "7", "-b", "3"])
        assert result.exit_code == 0
        assert "Packed 3 values into 9 bits (2 words)" in result.output
        assert out.read_bytes() == bytes([0b10101111, 0b10000000])

    def test_read(self, tmp_path: Path) -> None:
        out = tmp_path / "packed.bin"
        self._pack(out, "5", "3", "7", "-b", "3")
        result = runner.invoke(app, ["read", str(out), "-b", "3", "-n", "2"])
        assert result.exit_code == 0
        assert "7 0x7 0b111" in result.output

    def test_read_with_limit(self, tmp_path: Path) -> None:
        out = tmp_path / "packed.bin"
        self._pack(out, "5", "3", "7", "-b", "3")
        result = runner.invoke(app, ["read", str(out), "-b", "3", "-n", "2", "--limit", "8"])
        assert result.exit_code == 0
        assert "6 0x6 0b110" in result.output

    def test_padded_little_endian_words(self, tmp_path: Path) -> None:
        out = tmp_path / "packed.bin"
        options = ["-b", "12", "-w", "16", "--left-pad", "2", "--right-pad", "1", "-e", "little"]
        self._pack(out, "4095", "1234", *options)
        # 24 bits in 13-bit spans
        assert len(out.read_bytes()) == 4

        result = runner.invoke(app, ["read", str(out), "-n", "1", *options])
        assert result.exit_code == 0
        assert "1234 0x4d2" in result.output

    def test_dump(self, tmp_path: Path) -> None:
        out = tmp_path / "packed.bin"
        self._pack(out, "1", "2", "3", "4", "-b", "4")
        result = runner.invoke(app, ["dump", str(out), "-b", "4"])
        assert result.exit_code == 0
        assert "Block" in result.output
        assert "0011" in result.output

    def test_pack_value_too_large(self, tmp_path: Path) -> None:
        out = tmp_path / "packed.bin"
        result = runner.invoke(app, ["pack", str(out), "8", "-b", "3"])
        assert result.exit_code == 1
        assert not out.exists()

    def test_invalid_endian(self, tmp_path: Path) -> None:
        out = tmp_path / "packed.bin"
        out.write_bytes(b"\x00\x00")
        result = runner.invoke(app, ["read", str(out), "-b", "4", "-w", "16", "-e", "middle"])
        assert result.exit_code == 1

    def test_invalid_padding(self, tmp_path: Path) -> None:
        out = tmp_path / "packed.bin"
        out.write_bytes(b"\x00")
        result = runner.invoke(app, ["read", str(out), "-b", "4", "--left-pad", "8"])
        assert result.exit_code == 1
