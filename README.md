# insnfuzz

`insnfuzz` builds randomized instruction streams from templates and
formats the register-state reports that a test harness produces when it
runs those instructions. You can use it to compare how different CPUs,
emulators or simulators execute the same instructions.

The package has no runtime dependencies and needs Python 3.10 or later.

## Templates

A template document is a tree of `AstNode` objects (`insnfuzz.ast`).
Each node has a `NodeType`. `STRING` and `U64` nodes carry a value, which
is set with `set_data` or created with `create_node_str` or
`create_node_u64`. A document is made of three kinds of statement:

- **fields** (`NodeType.FIELD`): a named list of textual alternatives,
  such as a set of register names;
- **templates** (`NodeType.TEMPLATE`): a sequence of chunks;
- **contexts** (`NodeType.CONTEXT`): a name that applies to every
  template that follows, until the next context statement.

`TemplateParser.process_document` (`insnfuzz.parser`) walks a document.
It collects templates in `parser.templates` and fields in
`parser.fields`, and each template records the context in force when it
was read. The chunks of a template (`insnfuzz.templates`) are:

- `StringChunk`: literal text;
- `FieldChunk`: a field, which expands to one of its alternatives at
  random;
- `ThisChunk`: the current location, printed as `.`;
- `BackRefChunk`: repeats the value an earlier chunk of the same
  template produced (`TEMPLATE_EXPR_PERCENT`, indexed by chunk position);
- `BinaryExpressionChunk`: `lhs + rhs` (`ExpressionKind.PLUS`).

Malformed trees raise `TemplateStructureError`. This covers a node of the
wrong kind, a reference to a field that has not been declared yet, a
back-reference index that is out of range, and field generator items,
which are not supported.

```python
from insnfuzz.ast import AstNode, NodeType, create_node_str
from insnfuzz.parser import TemplateParser

def text_item(value):
    return AstNode(NodeType.FIELD_BODY_ITEM_TEXT, [create_node_str(value)])

reg_field = AstNode(NodeType.FIELD, [
    create_node_str("reg"),
    AstNode(NodeType.FIELD_BODY_LIST, [text_item("x0"), text_item("x1")]),
])
template = AstNode(NodeType.TEMPLATE, [
    AstNode(NodeType.TEMPLATE_CHUNK_LIST, [
        AstNode(NodeType.TEMPLATE_CHUNK_TEXT, [create_node_str("add ")]),
        AstNode(NodeType.TEMPLATE_CHUNK_EXPR, [
            AstNode(NodeType.TEMPLATE_EXPR_ID, [create_node_str("reg")]),
        ]),
        AstNode(NodeType.TEMPLATE_CHUNK_TEXT, [create_node_str(", x2, x3")]),
    ]),
])
doc = AstNode(NodeType.DOCUMENT, [reg_field, template])

parser = TemplateParser()
parser.process_document(doc)
templates = parser.templates
```

## Assembler output

An assembly target (`insnfuzz.target.AssemblyTarget`) writes templates
as assembler source to a text stream. It chooses field values with a
`random.Random`, which you may pass in to get reproducible output. The
available targets are `arm`, `armv8`, `riscv`, `thumb2` and `x86`
(`insnfuzz.targets`):

```python
import io
import random

from insnfuzz.targets import available_targets, create_target

print(available_targets())  # ['arm', 'armv8', 'riscv', 'thumb2', 'x86']

out = io.StringIO()
target = create_target("armv8", out, random.Random(1))
target.print_template_collection(templates)
print(out.getvalue())
```

`print_template_collection` writes the header. It then writes every
template `count_per_template` times (10 by default), each with its size
prefix, and finally the footer. `processed_templates` counts how many
were written. `print_template` writes a single framed instance, and
`print_bare_template` writes one expansion with no framing.

- `armv8` frames each instruction with `.word 2f-1f` and a context id
  word (`armv8_context_id`). It is the only target that prints `ThisChunk`,
  `BackRefChunk` and `BinaryExpressionChunk`.
- `x86` frames each instruction with `.byte 2f-1f` and a context id byte
  (`x86_context_id`: `bdiv`, `wdiv`, `ddiv` and `qdiv` map to 1–4).
- `arm` and `thumb2` frame with `.byte 2f-1f`, and `riscv` with
  `.byte 0x4`. These targets print `???` for chunk kinds other than text
  and fields.

Each write is cut to 255 characters.

Targets are looked up through a `ComponentRegistry` (`insnfuzz.registry`).
A registry supports `register`, `instantiate`, `dump` and `in`. An unknown
name raises `UnknownComponentError`.

## Harness data

These modules cover the data that flows into and out of a test harness:

- `insnfuzz.descriptor`: `Descriptor` (instruction bytes plus a context
  id). `load_descriptor` reads one entry from a binary stream: a size
  byte, a context byte, then the encoding. `read_descriptors` yields
  entries until the stream ends or an entry of size zero appears.
- `insnfuzz.mt19937`: `MT19937`, the 32-bit Mersenne Twister (default
  seed 5489) used to draw input states, so that runs can be reproduced.
- `insnfuzz.armformat`: `ArmState`, `MemState` with `MemoryImage`, and
  `Thumb2State`. Each state has `pack`/`unpack` for its binary layout.
  The module also provides the `randomize_*_state` generators and
  `format_arm_result`, `format_mem_result` and `format_thumb2_result`.
- `insnfuzz.thumbformat`: `format_thumb2_it_result` and
  `format_thumb2_mem_result`, plus `VfpState`, `randomize_vfp_state` and
  `format_thumb2_vfp_result`.
- `insnfuzz.x86format`: `X86State`, `randomize_x86_state` (with
  division-safe contexts 1–4) and `format_x86_result`.
- `insnfuzz.armv8`: `TestRecord`, `Armv8State` and `DefaultContext`,
  together with `read_tests`, `input_file_from_cmdline`, `format_results`
  and `format_run` for the bare-metal ARMv8 harness.
- `insnfuzz.cformat`: `vsnprintf`, the small printf dialect that the
  bare-metal harness uses (`%d %u %x %b %p %s %c`, pad widths, `l`).

```python
from insnfuzz.armformat import format_thumb2_result, randomize_thumb2_state
from insnfuzz.descriptor import read_descriptors
from insnfuzz.mt19937 import MT19937

engine = MT19937()
with open("tests.bin", "rb") as stream:
    for descriptor in read_descriptors(stream):
        state = randomize_thumb2_state(engine)
        print(format_thumb2_result(descriptor, state, state), end="")
```

## What it does not do

- It does not read template files from text. Documents must be built as
  `AstNode` trees by the caller.
- It does not execute instructions. The output states passed to the
  `format_*` functions must come from whatever actually ran the code.
- It provides no command-line programs. Everything is used as a library.