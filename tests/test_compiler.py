#!/usr/bin/env python3
"""
Compiler tests: run-length folding, loop jump distances and bracket errors.
"""

import io
import logging
import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', 'src'))

import pytest

from bfvm import BFCompileError, Compiler, Instruction, Op, compile_string
from bfvm.errors import UNMATCHED_CLOSE, UNMATCHED_OPEN
from bfvm.instructions import jump_target


def ops(source):
    result = compile_string(source)
    assert result.ok, result.error
    return [(i.op, i.operand) for i in result.program]


# ===== Folding =====

def test_repeated_plus_folds_into_one_instruction():
    assert ops('+++++') == [(Op.CELL_DELTA, 5)]


def test_alternating_plus_minus_folds_to_net_count():
    assert ops('+-+-+') == [(Op.CELL_DELTA, 1)]


def test_run_netting_to_zero_emits_nothing():
    assert ops('+-') == []
    assert ops('><<>') == []


def test_pointer_moves_fold():
    assert ops('>>><') == [(Op.POINTER_DELTA, 2)]
    assert ops('<<') == [(Op.POINTER_DELTA, -2)]


def test_switching_category_flushes_pending_run():
    assert ops('++>+') == [
        (Op.CELL_DELTA, 2),
        (Op.POINTER_DELTA, 1),
        (Op.CELL_DELTA, 1),
    ]


def test_trailing_run_is_flushed_at_end_of_source():
    assert ops('.+++') == [(Op.OUTPUT, 0), (Op.CELL_DELTA, 3)]
    assert ops('.>>') == [(Op.OUTPUT, 0), (Op.POINTER_DELTA, 2)]


def test_io_flushes_and_has_zero_operand():
    assert ops('+.-,') == [
        (Op.CELL_DELTA, 1),
        (Op.OUTPUT, 0),
        (Op.CELL_DELTA, -1),
        (Op.INPUT, 0),
    ]


def test_unrecognized_characters_are_comments():
    assert ops('++ add two\n++ and two more!') == [(Op.CELL_DELTA, 4)]


def test_source_without_symbols_is_an_empty_program():
    result = compile_string('hello world\n\n')
    assert result.ok
    assert len(result.program) == 0
    assert ops('') == []


# ===== Loops =====

def test_clear_loop_operands():
    assert ops('[-]') == [
        (Op.LOOP_START, 2),
        (Op.CELL_DELTA, -1),
        (Op.LOOP_END, -3),
    ]


def test_empty_loop_operands():
    assert ops('+[]') == [
        (Op.CELL_DELTA, 1),
        (Op.LOOP_START, 1),
        (Op.LOOP_END, -2),
    ]


def test_nested_loop_operands():
    assert ops('[[]]') == [
        (Op.LOOP_START, 3),
        (Op.LOOP_START, 1),
        (Op.LOOP_END, -2),
        (Op.LOOP_END, -4),
    ]


@pytest.mark.parametrize('source', [
    '[-]',
    '+[>+<-]>.',
    '[[]]',
    '[[][[-]>]]',
    '++++++++[>++++[>++>+++>+++>+<<<<-]>+>+>->>+[<]<-]>>.',
    ',[.,]',
])
def test_jumps_land_next_to_matching_bracket(source):
    program = compile_string(source).unwrap()

    starts = []
    pairs = {}
    for pc, inst in enumerate(program):
        if inst.op == Op.LOOP_START:
            starts.append(pc)
        elif inst.op == Op.LOOP_END:
            pairs[starts.pop()] = pc
    assert not starts

    for start, end in pairs.items():
        # taken LOOP_START resumes right after its LOOP_END
        assert jump_target(program, start) == end + 1
        # taken LOOP_END resumes on its LOOP_START, which falls into the body
        assert jump_target(program, end) == start


# ===== Errors =====

def test_lone_closing_bracket_is_rejected():
    result = compile_string(']')
    assert not result.ok
    assert result.program is None
    assert result.error.kind == UNMATCHED_CLOSE
    assert 'unmatched closing bracket' in str(result.error)


def test_lone_opening_bracket_is_rejected():
    result = compile_string('[')
    assert not result.ok
    assert result.program is None
    assert result.error.kind == UNMATCHED_OPEN
    assert 'unmatched opening bracket' in str(result.error)


def test_closing_bracket_error_position():
    result = compile_string('+[-]\n++]+')
    assert result.error.kind == UNMATCHED_CLOSE
    assert (result.error.line, result.error.column) == (2, 3)


def test_opening_bracket_error_reports_innermost_unclosed():
    result = compile_string('+\n[[]\n')
    assert result.error.kind == UNMATCHED_OPEN
    assert (result.error.line, result.error.column) == (2, 1)

    result = compile_string('[ [ ]')
    assert (result.error.line, result.error.column) == (1, 1)

    result = compile_string('[] [[]')
    assert (result.error.line, result.error.column) == (1, 4)


def test_unwrap_raises_compile_error():
    with pytest.raises(BFCompileError) as excinfo:
        compile_string('+]').unwrap()
    assert excinfo.value.kind == UNMATCHED_CLOSE


def test_compiles_from_text_stream():
    result = Compiler().compile(io.StringIO('++\n[>+<-]\n'))
    assert result.unwrap()[0] == Instruction(Op.CELL_DELTA, 2)


# ===== Idempotence =====

def test_compiling_twice_gives_equal_programs():
    source = '++++++++[>++++[>++>+++>+++>+<<<<-]>+>+>->>+[<]<-]>>.'
    first = compile_string(source).unwrap()
    second = compile_string(source).unwrap()
    assert first == second
    assert hash(first) == hash(second)


def test_compiler_instance_is_reusable():
    compiler = Compiler()
    first = compiler.compile('+[-]').unwrap()
    assert not compiler.compile(']').ok
    assert compiler.compile('+[-]').unwrap() == first


def test_compile_is_logged(caplog):
    caplog.set_level(logging.DEBUG, logger='bfvm.compiler')
    compile_string('++ + [')
    compile_string('+++')
    assert "compile failed: unmatched_open at line 1, column 6" in caplog.text
    assert "compiled 3 symbols into 1 instructions" in caplog.text


def test_compiles_from_binary_stream():
    result = Compiler().compile(io.BytesIO(b'+++.'))
    assert [(i.op, i.operand) for i in result.unwrap()] == [(Op.CELL_DELTA, 3), (Op.OUTPUT, 0)]
