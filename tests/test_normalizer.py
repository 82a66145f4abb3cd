from api.normalizer import (
    PLACEHOLDER_BODY,
    WrapStyle,
    has_entry_point,
    mask_literals,
    normalize,
    strip_leading_comments,
    strip_package_declarations,
)


def test_existing_entry_point_is_kept() -> None:
    code = 'fun main() {\n    println("hi")\n}'
    assert normalize("\n\n  " + code + "  \n") == code


def test_entry_point_with_brace_on_next_line() -> None:
    code = "fun main()\n{\n    println(1)\n}"
    assert normalize(code) == code


def test_snippet_is_wrapped_and_indented() -> None:
    code = 'val x = 1\n\nprintln(x)'
    assert normalize(code) == 'fun main() {\n    val x = 1\n\n    println(x)\n}'


def test_blank_lines_inside_wrapped_body_are_empty() -> None:
    result = normalize("val a = 1\n   \nval b = 2")
    assert result.split("\n")[2] == ""


def test_lenient_signature_without_brace_is_wrapped() -> None:
    result = normalize("fun main() = println(1)")
    assert result.startswith("fun main() {\n    fun main() = println(1)")


def test_empty_input_gets_placeholder_body() -> None:
    expected = "fun main() {\n    " + PLACEHOLDER_BODY + "\n}"
    assert normalize("") == expected
    assert normalize("   \n\n  ") == expected


def test_only_comments_and_package_gets_placeholder_body() -> None:
    result = normalize("/* header */\n// note\npackage com.example.demo\n")
    assert result == "fun main() {\n    " + PLACEHOLDER_BODY + "\n}"


def test_package_declaration_stripped_on_first_line() -> None:
    result = normalize("package com.example\n\nfun main() {\n    println(1)\n}")
    assert result == "fun main() {\n    println(1)\n}"
    assert "package" not in result


def test_package_declaration_stripped_later_in_text() -> None:
    result = normalize('println("a")\n  package org.demo.app\nprintln("b")')
    assert "package" not in result
    assert '    println("a")' in result
    assert '    println("b")' in result


def test_package_in_string_or_comment_is_kept() -> None:
    code = 'val s = "x"\n// package a.b\nval t = "\npackage c.d"'
    stripped = strip_package_declarations('println("package a.b")\n/*\npackage c.d\n*/')
    assert stripped == 'println("package a.b")\n/*\npackage c.d\n*/'
    assert "// package a.b" in strip_package_declarations(code)


def test_leading_comment_header_is_removed() -> None:
    code = "/* Copyright\n * demo\n */\n// second\n\nfun main() {\n}"
    assert normalize(code) == "fun main() {\n}"


def test_nested_block_comment_header() -> None:
    assert strip_leading_comments("/* a /* b */ c */ val x = 1") == "val x = 1"


def test_comments_after_content_are_kept() -> None:
    code = "val x = 1 // one\n/* trailing */"
    assert strip_leading_comments(code) == code


def test_commented_out_entry_point_does_not_count() -> None:
    assert not has_entry_point("// fun main() {\nprintln(1)")
    assert not has_entry_point("/*\nfun main() {\n}\n*/")
    result = normalize("println(1)\n// fun main() {")
    assert result.startswith("fun main() {\n")
    assert result.endswith("\n}")


def test_entry_point_in_string_does_not_count() -> None:
    code = 'val s = """\nfun main() {\n"""\nprintln(s)'
    assert not has_entry_point(code)
    assert normalize(code).startswith("fun main() {\n    val s = ")


def test_nested_entry_point_does_not_count() -> None:
    code = "class App {\n    fun main() {\n    }\n}"
    assert not has_entry_point(code)


def test_entry_point_after_other_declarations() -> None:
    code = 'data class P(val x: Int)\n\nfun main() {\n    println(P(1))\n}'
    assert has_entry_point(code)
    assert normalize(code) == code


def test_braces_in_literals_do_not_affect_depth() -> None:
    code = "val open = \"{\"\nval c = '{'\nfun main() {\n    println(open)\n}"
    assert has_entry_point(code)


def test_mask_preserves_length_and_lines() -> None:
    source = 'val a = "x // y" // c\n/* b\n */ val t = "${a + "}"}"\nval r = """raw\n{"""'
    masked = mask_literals(source)
    assert len(masked) == len(source)
    assert masked.count("\n") == source.count("\n")
    assert "//" not in masked
    assert "raw" not in masked
    assert "{a" in masked


def test_containerized_wrap_style() -> None:
    result = normalize('println("hi")', WrapStyle.CONTAINERIZED)
    assert result == (
        "object Main {\n"
        "    @JvmStatic\n"
        "    fun main(args: Array<String>) {\n"
        '        println("hi")\n'
        "    }\n"
        "}"
    )


def test_containerized_style_keeps_existing_entry_point() -> None:
    code = "fun main() {\n}"
    assert normalize(code, WrapStyle.CONTAINERIZED) == code


def test_normalize_is_deterministic() -> None:
    code = "package x\nval a = 1\nprintln(a)"
    assert normalize(code) == normalize(code)
    assert normalize(normalize(code)) == normalize(code)
