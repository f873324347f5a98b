import pytest

from raycube.config import (
    ConfigError,
    SceneConfig,
    check_args,
    has_cub_extension,
    parse_color,
    parse_header,
    parse_int,
    read_scene_lines,
    texture_value,
)


def _split(color):
    return (color >> 16) & 0xFF, (color >> 8) & 0xFF, color & 0xFF


HEADER = [
    "NO ./n.xpm",
    "SO ./s.xpm",
    "WE ./w.xpm",
    "EA ./e.xpm",
    "",
    "F 220,100,0",
    "C 225,30,0",
    "",
    "111",
]


# parse_int

@pytest.mark.parametrize(
    "text, expected",
    [("42", 42), ("  -17", -17), ("+7", 7), ("12abc", 12), ("\t\n 9", 9)],
)
def test_parse_int_values(text, expected):
    assert parse_int(text) == expected


def test_parse_int_no_digits_is_zero():
    assert parse_int("abc") == 0


def test_parse_int_positive_overflow():
    assert parse_int("99999999999999999999999") == -1


def test_parse_int_negative_overflow():
    assert parse_int("-99999999999999999999999") == 0


# has_cub_extension / check_args

@pytest.mark.parametrize(
    "path, expected",
    [
        ("map.cub", True),
        ("maps/level.cub", True),
        ("map.cu", False),
        ("map.cubx", False),
        ("map", False),
        ("./map.cub", False),
        ("a.b.cub", False),
    ],
)
def test_has_cub_extension(path, expected):
    assert has_cub_extension(path) is expected


def test_check_args_returns_path():
    assert check_args(["level.cub"]) == "level.cub"


@pytest.mark.parametrize("argv", [[], ["a.cub", "b.cub"]])
def test_check_args_wrong_count(argv):
    with pytest.raises(ConfigError, match="Invalid Arguments"):
        check_args(argv)


def test_check_args_wrong_type():
    with pytest.raises(ConfigError, match="Invalid file type"):
        check_args(["level.txt"])


# parse_color

def test_parse_color_components():
    assert _split(parse_color("220,100,0")) == (220, 100, 0)


def test_parse_color_extremes():
    assert _split(parse_color("255,255,255")) == (255, 255, 255)
    assert parse_color("0,0,0") == 0


def test_parse_color_leading_zero_in_first_component():
    assert _split(parse_color("0255,1,2")) == (255, 1, 2)


def test_parse_color_three_digit_last_component():
    assert _split(parse_color("1,2,003")) == (1, 2, 3)


@pytest.mark.parametrize(
    "text",
    [
        None,
        "",
        "256,0,0",
        "0,256,0",
        "0,0,256",
        "1000,0,0",
        "1,2",
        "1,2,",
        "1,2,3,",
        "1,,2,3",
        ",1,2",
        "a,1,2",
        "1, 2,3",
        "1,2,3,4",
        "1,2,0003",
        "-1,2,3",
    ],
)
def test_parse_color_errors(text):
    with pytest.raises(ConfigError, match="Error color"):
        parse_color(text)


# texture_value

def test_texture_value_strips_leading_blanks():
    assert texture_value("   ./wall.xpm") == "./wall.xpm"


@pytest.mark.parametrize("rest", ["", "   "])
def test_texture_value_without_token_is_unchanged(rest):
    assert texture_value(rest) == rest


@pytest.mark.parametrize("rest", [" ./a b.xpm", " ./a.xpm ", "x\t"])
def test_texture_value_rejects_inner_blanks(rest):
    with pytest.raises(ConfigError, match="Invalid Textures"):
        texture_value(rest)


# parse_header

def test_parse_header_reads_all_entries():
    config = parse_header(HEADER)
    assert config.north == "./n.xpm"
    assert config.south == "./s.xpm"
    assert config.west == "./w.xpm"
    assert config.east == "./e.xpm"
    assert _split(config.floor) == (220, 100, 0)
    assert _split(config.ceiling) == (225, 30, 0)


def test_parse_header_map_start_is_first_line_after_header():
    config = parse_header(HEADER)
    assert HEADER[config.map_start] == ""
    assert HEADER[config.map_start - 1] == "C 225,30,0"


def test_parse_header_map_line_directly_after():
    lines = HEADER[:4] + ["F 1,2,3", "C 4,5,6", "  111"]
    config = parse_header(lines)
    assert lines[config.map_start] == "  111"


def test_parse_header_indented_identifiers():
    lines = ["  NO a", "\tSO b", " WE c", "EA d", "F 1,2,3", "C 4,5,6", "1"]
    config = parse_header(lines)
    assert (config.north, config.south, config.west, config.east) == ("a", "b", "c", "d")


def test_parse_header_identifier_without_space():
    lines = ["NO./n", "SO./s", "WE./w", "EA./e", "F1,2,3", "C4,5,6", "1"]
    config = parse_header(lines)
    assert config.north == "./n"
    assert _split(config.floor) == (1, 2, 3)


def test_parse_header_is_scene_config_with_equal_values():
    first = parse_header(HEADER)
    second = parse_header(list(HEADER))
    assert isinstance(first, SceneConfig)
    assert first == second


@pytest.mark.parametrize(
    "extra, message",
    [
        ("NO ./other.xpm", "Duplicate North"),
        ("SO ./other.xpm", "Duplicate South"),
        ("WE ./other.xpm", "Duplicate West"),
        ("EA ./other.xpm", "Duplicate East"),
        ("C 1,1,1", "Duplicate Ciel Color"),
        ("F 1,1,1", "Duplicate Floor Color"),
    ],
)
def test_parse_header_duplicates(extra, message):
    lines = HEADER[:7] + [extra] + HEADER[7:]
    with pytest.raises(ConfigError, match=message):
        parse_header(lines)


def test_parse_header_map_before_header_complete():
    with pytest.raises(ConfigError, match="Error Textures"):
        parse_header(HEADER[:4] + ["111", "F 1,2,3", "C 1,2,3"])


def test_parse_header_blank_with_spaces_before_complete():
    with pytest.raises(ConfigError, match="Error Textures"):
        parse_header(["NO a", "   ", "SO b"])


def test_parse_header_incomplete():
    with pytest.raises(ConfigError, match="Textures doesn't exist"):
        parse_header(HEADER[:4] + ["", "F 1,2,3"])


def test_parse_header_empty():
    with pytest.raises(ConfigError, match="Textures doesn't exist"):
        parse_header([])


def test_parse_header_bad_color():
    with pytest.raises(ConfigError, match="Error color"):
        parse_header(HEADER[:4] + ["F 300,0,0"])


def test_parse_header_bad_texture_spacing():
    with pytest.raises(ConfigError, match="Invalid Textures"):
        parse_header(["NO ./a b"])


# read_scene_lines

def test_read_scene_lines_strips_newlines(tmp_path):
    scene = tmp_path / "scene.cub"
    scene.write_bytes(b"NO a\n\nSO b\n")
    assert read_scene_lines(scene) == ["NO a", "", "SO b"]


def test_read_scene_lines_without_final_newline(tmp_path):
    scene = tmp_path / "scene.cub"
    scene.write_bytes(b"one\ntwo")
    assert read_scene_lines(scene) == ["one", "two"]


def test_read_scene_lines_keeps_trailing_blank_line(tmp_path):
    scene = tmp_path / "scene.cub"
    scene.write_bytes(b"one\n\n")
    assert read_scene_lines(scene) == ["one", ""]


def test_read_scene_lines_empty_file(tmp_path):
    scene = tmp_path / "scene.cub"
    scene.write_bytes(b"")
    assert read_scene_lines(scene) == []


def test_read_scene_lines_missing(tmp_path):
    with pytest.raises(ConfigError, match="File doesn't exist"):
        read_scene_lines(tmp_path / "missing.cub")


def test_read_then_parse_round_trip(tmp_path):
    scene = tmp_path / "scene.cub"
    scene.write_text("\n".join(HEADER) + "\n")
    lines = read_scene_lines(scene)
    config = parse_header(lines)
    assert lines == HEADER
    assert config.east == "./e.xpm"
    assert lines[config.map_start:] == ["", "111"]