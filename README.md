# cfasm

`cfasm` assembles CF assembly text into an in-memory object. The object holds
the machine code, the labels and constants the text declares, and the links
where the code refers to a label. The package also holds the data types of the
CF language syntax tree and can dump the tree's declarations as JSON text.

## Installing

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Assembling

```python
from cfasm.assembler import assemble
from cfasm.status import AssemblyError

source = """
start:
    push 1.5        ; float immediate
    push ax         ; register
    push [bx + 4]   ; memory at register plus offset
    fadd
    jmp start
"""

try:
    obj = assemble(source, "main.cfasm")
except AssemblyError as error:
    print(error)          # '<status> at <line>: "<line text>"'
else:
    print(obj.code.hex())
    for label in obj.labels:
        print(label)      # Label(label=..., source_line=..., value=..., is_relative=...)
    for link in obj.links:
        print(link)       # Link(label=..., source_line=..., code_offset=...)
```

`assemble(text, source_name)` returns an `AssembledObject` with the fields
`source_name`, `code` (bytes), `links` and `labels`. When assembling fails it
raises `AssemblyError`. The error's `status` is an `AssemblyStatus`, `line` is
the number of the failing line (counted from 1), and `contents` is that line's
text with its comment and outer spaces removed. `str(status)` gives a short
description such as `"unknown token"`.

### Source format

- One instruction per line. A `;` starts a comment that runs to the end of the line.
  Blank lines and lines that hold only a comment are skipped.
- `name:` declares a label whose value is the current code offset (`is_relative=True`).
- `name = value` declares a constant (`is_relative=False`). The value is an integer,
  which is kept to 32 bits, or a float, which is stored as the bits of a 32-bit float.
- Label and constant names must be shorter than `LABEL_MAX` (32) characters.
- Numbers are decimal integers, hex integers such as `0x10`, or decimals with
  a fraction or an exponent, which are floats.
- `push` and `pop` take one of these operands:
  - a register: `cz`, `fl`, `ax`, `bx`, `cx`, `dx`, `ex`, `fx`
  - an immediate: an integer, a float, or a label name
  - a register plus an immediate: `ax + 4`
  - a memory access in brackets: `[ax]`, `[16]`, `[ax + 4]`
- `syscall` takes an integer argument.
- `jmp`, `jle`, `jl`, `jge`, `jg`, `je`, `jne` and `call` take a label name.
- Every other mnemonic (`add`, `fsqrt`, `ret`, `halt`, ...) takes no operand.

Mnemonics are matched on their first four characters only, so a longer word
that starts like a mnemonic (for instance `callback`) is read as that
instruction and cannot be used as a label at the start of a line.

Where the code refers to a label, four `0xFF` bytes are written in its place
and a `Link` records the offset of those bytes for later resolution.

### Encoding

Each instruction starts with its `Opcode` byte. `push`/`pop` add one operand
byte, built by `PushPopInfo.to_byte()`: bit 0 is "read an immediate", bit 1 is
"memory access", bits 2 and up are the register index. When an immediate is
read, four little-endian bytes follow. `syscall` and the jump instructions are
followed by four little-endian bytes.

### Lower-level pieces

- `cfasm.lexer`: `iter_lines(text)` yields `SourceLine` objects for the
  meaningful lines. `LineLexer(line)` returns `Token` objects from
  `next_token()` and can be iterated. `at_end()` tells whether the whole line
  has been read.
- `cfasm.assembler`: `parse_opcode(identifier)` and `parse_register(identifier)`
  return an `Opcode` or a register index, or `None`.

## Syntax tree

`cfasm.syntax` defines the tree types of the CF language: `Ast`,
`Declaration`, `Function`, `FunctionParam`, `Variable`, `Statement`, `Block`,
`Expression` and `Span`. It also defines the enums `AstType`,
`DeclarationType`, `StatementType`, `ExpressionType`, `AssignmentOperator`,
`BinaryOperator` and `ParseStatus`. `Ast.dump_json()` returns the declarations
as JSON text. Each declaration is written with its type and span. Variable
declarations also get their name and type.

## What this package does not do

- It does not parse CF language source into a syntax tree. The trees have to be
  built in code.
- It does not resolve links, link objects into an executable, write objects or
  executables to files, disassemble, or run code.
- It has no command-line program. It is used as a library.