from pathlib import Path

from click.testing import CliRunner

from spring_http_requests.cli import main

FIXTURES = Path(__file__).parent / "fixtures"
CATALOG = FIXTURES / "catalog.yaml"


def _http_file(tmp_path, text):
    f = tmp_path / "requests.http"
    f.write_text(text, encoding="utf-8")
    return f


class TestCliGenerate:
    def test_generate_writes_file(self, tmp_path):
        text = "POST http://localhost:8080/users\n\n"
        f = _http_file(tmp_path, text)

        runner = CliRunner()
        result = runner.invoke(main, [
            "generate", str(f),
            "--catalog", str(CATALOG),
            "--offset", str(len(text)),
        ])

        assert result.exit_code == 0
        assert "UserController#create" in result.output
        assert f.read_text(encoding="utf-8") == (
            "POST http://localhost:8080/users\n"
            "Content-Type: application/json\n\n"
            '{\n\t"name": ,\n\t"email": ,\n\t"id": \n}'
        )

    def test_generate_by_line(self, tmp_path):
        text = "GET /users\n\n\n"
        f = _http_file(tmp_path, text)

        runner = CliRunner()
        result = runner.invoke(main, [
            "generate", str(f),
            "--catalog", str(CATALOG),
            "--line", "3",
        ])

        assert result.exit_code == 0
        assert f.read_text(encoding="utf-8") == "GET /users?page=&pageSize=\n\n\n"

    def test_dry_run_leaves_file_untouched(self, tmp_path):
        text = "GET /users\n\n"
        f = _http_file(tmp_path, text)

        runner = CliRunner()
        result = runner.invoke(main, [
            "generate", str(f),
            "--catalog", str(CATALOG),
            "--offset", str(len(text)),
            "--dry-run",
        ])

        assert result.exit_code == 0
        assert "@10: '?page=&pageSize='" in result.output
        assert f.read_text(encoding="utf-8") == text

    def test_nothing_generated(self, tmp_path):
        text = "GET /nowhere\n\n"
        f = _http_file(tmp_path, text)

        runner = CliRunner()
        result = runner.invoke(main, [
            "generate", str(f),
            "--catalog", str(CATALOG),
            "--offset", str(len(text)),
        ])

        assert result.exit_code == 0
        assert "Nothing generated." in result.output
        assert f.read_text(encoding="utf-8") == text

    def test_requires_a_caret(self, tmp_path):
        f = _http_file(tmp_path, "GET /users\n\n")

        runner = CliRunner()
        result = runner.invoke(main, ["generate", str(f), "--catalog", str(CATALOG)])

        assert result.exit_code != 0
        assert "--offset" in result.output

    def test_line_out_of_range(self, tmp_path):
        f = _http_file(tmp_path, "GET /users\n")

        runner = CliRunner()
        result = runner.invoke(main, [
            "generate", str(f),
            "--catalog", str(CATALOG),
            "--line", "9",
        ])

        assert result.exit_code != 0

    def test_bad_catalog(self, tmp_path):
        f = _http_file(tmp_path, "GET /users\n\n")
        catalog = tmp_path / "catalog.yaml"
        catalog.write_text("endpoints: [unclosed")

        runner = CliRunner()
        result = runner.invoke(main, [
            "generate", str(f),
            "--catalog", str(catalog),
            "--offset", "12",
        ])

        assert result.exit_code == 1
        assert "Cannot parse" in result.output


class TestCliCheck:
    def test_available(self, tmp_path):
        f = _http_file(tmp_path, "POST {{host}}/users\n\n")

        runner = CliRunner()
        result = runner.invoke(main, ["check", str(f), "--line", "2"])

        assert result.exit_code == 0
        assert "Generation available for POST /users" in result.output

    def test_not_available(self, tmp_path):
        f = _http_file(tmp_path, "POST /users\n\n{}\n")

        runner = CliRunner()
        result = runner.invoke(main, ["check", str(f), "--line", "2"])

        assert result.exit_code == 1
        assert "not available" in result.output


class TestCliResolve:
    def test_resolve_shows_classification(self):
        runner = CliRunner()
        result = runner.invoke(main, ["resolve", str(CATALOG), "/users/1/avatar", "--method", "POST"])

        assert result.exit_code == 0
        assert "POST /users/{id}/avatar -> com.example.demo.UserController#uploadAvatar" in result.output
        assert "query avatar: org.springframework.web.multipart.MultipartFile [file]" in result.output
        assert "query description: java.lang.String" in result.output

    def test_resolve_miss(self):
        runner = CliRunner()
        result = runner.invoke(main, ["resolve", str(CATALOG), "/nowhere"])

        assert result.exit_code == 1
        assert "No endpoint" in result.output


class TestCliErrors:
    def test_missing_config_from_env(self, tmp_path, monkeypatch):
        text = "POST /users\n\n"
        f = _http_file(tmp_path, text)
        monkeypatch.setenv("SPRING_HTTP_REQUESTS_CONFIG", str(tmp_path / "nope.yaml"))

        runner = CliRunner()
        result = runner.invoke(main, [
            "generate", str(f),
            "--catalog", str(CATALOG),
            "--offset", str(len(text)),
        ])

        assert result.exit_code == 1
        assert "Cannot read config" in result.output
        assert not isinstance(result.exception, FileNotFoundError)

    def test_missing_config_from_env_on_resolve(self, tmp_path, monkeypatch):
        monkeypatch.setenv("SPRING_HTTP_REQUESTS_CONFIG", str(tmp_path / "nope.yaml"))

        runner = CliRunner()
        result = runner.invoke(main, ["resolve", str(CATALOG), "/users", "--method", "POST"])

        assert result.exit_code == 1
        assert "Cannot read config" in result.output

    def test_http_file_not_utf8(self, tmp_path):
        f = tmp_path / "requests.http"
        f.write_bytes(b"POST /users\n\xff\xfe\n")

        runner = CliRunner()
        result = runner.invoke(main, ["check", str(f), "--offset", "0"])

        assert result.exit_code == 1
        assert "not valid UTF-8" in result.output

    def test_generate_keeps_crlf(self, tmp_path):
        f = tmp_path / "requests.http"
        f.write_bytes(b"POST /users\r\n\r\n")

        runner = CliRunner()
        result = runner.invoke(main, [
            "generate", str(f),
            "--catalog", str(CATALOG),
            "--offset", "15",
        ])

        assert result.exit_code == 0
        written = f.read_bytes()
        assert written.startswith(b"POST /users\r\nContent-Type: application/json\r\n\r\n{\r\n")
        assert b"\n" not in written.replace(b"\r\n", b"")
