# boilkit

boilkit renders model code from a description of a database schema. You
describe tables, columns and foreign keys in Python. boilkit then does the
following:

- works out consistent names for them;
- applies type replacements;
- renders Jinja2 templates into an output folder, once per table and once
  for each "singleton" template.

It also has small runtime helpers that generated code can use: column lists
for inserts and updates, request contexts, a global database handle and an
error marker.

## Installation

```
pip install boilkit
```

To run the test suite:

```
pip install "boilkit[test]"
pytest
```

## Column sets for inserts and updates

`boilkit.columns` decides which columns an insert or update touches.

```python
from boilkit.columns import infer, whitelist, greylist

cols = ["a", "b", "c"]
defaults = ["a", "c"]
no_defaults = ["b"]

insert, ret = infer().insert_column_set(cols, defaults, no_defaults, ["a"])
# insert == ["a", "b"], ret == ["c"]

whitelist("a").update_column_set(["a", "b"], ["a"])   # ["a"]
greylist("a").update_column_set(["a", "b"], ["a"])    # ["a", "b"]
```

There are five kinds of list, each a frozen `Columns` value with a
`ColumnsKind`.

| List | Columns inserted | Columns updated |
| --- | --- | --- |
| `none()` | none | none |
| `infer()` | those without a default, plus those whose default is overridden by a non-zero value | all columns except the primary key |
| `whitelist(...)` | exactly the columns given | exactly the columns given |
| `blacklist(...)` | the inferred columns minus the ones given | all columns, minus the primary key and the ones given |
| `greylist(...)` | the inferred columns plus the ones given | all columns, minus the primary key, plus the ones given |

`insert_column_set` also returns the default columns that are not inserted.
These are the ones to read back after the insert.

The helpers `set_complement`, `set_merge` and `sort_by_keys` are public too.

## Schema model

`boilkit.model` describes a schema with plain dataclasses:

- `Table`, with `columns`, `pkey`, `fkeys` and `is_join_table`;
- `Column`;
- `ForeignKey`;
- `Dialect`, which holds the quote characters and SQL feature flags.

Import sets for generated files are `ImportSet` and `ImportCollection`.
`ImportSet.format()` renders an import clause. `add_type_imports` adds the
imports that each column type needs.

## Naming

`boilkit.naming` provides the naming helpers:

- casing: `title_case`, `camel_case`;
- inflection: `plural`, `singular`;
- relationship names built from foreign keys.

```python
from boilkit.model import ForeignKey
from boilkit.naming import txt_name_to_one, txt_name_to_many

fk = ForeignKey(table="videos", column="producer_id", foreign_table="users", foreign_column="id")
txt_name_to_one(fk)   # ("ProducerVideos", "Producer")

txt_name_to_many(
    ForeignKey(column="video_id", foreign_table="videos"),
    ForeignKey(column="tag_id", foreign_table="tags"),
)                     # ("Videos", "Tags")
```

`boilkit.aliases.fill_aliases(aliases, tables)` fills in, in place, every
name that you did not set yourself:

- the table spellings (`up_plural`, `up_singular`, `down_plural`,
  `down_singular`);
- the column aliases;
- the relationship names, including both sides of a join table.

Overrides given through `Aliases`, `TableAlias` and `RelationshipAlias` are
kept. The lookup methods raise `KeyError` when a name is missing:

- `Aliases.table`;
- `Aliases.many_relationship`;
- `TableAlias.column`;
- `TableAlias.relationship`.

## Configuration

`boilkit.config.Config` holds the options for one generation run, including:

- `pkg_name` and `out_folder`;
- `template_dirs` and `replacements`;
- `tags` and `tag_ignore`;
- the `no_*` and `add_*` feature flags;
- `type_replaces`, `aliases` and `auto_columns`.

`Config.output_dir_depth()` tells how many directories deep the output
folder is.

`convert_aliases` and `convert_type_replace` turn loosely typed data, such as
a parsed TOML document, into `Aliases` and `TypeReplace` objects. Both the
nested-mapping form and the list-of-named-entries form are accepted.

## Templates

Templates are Jinja2 files ending in `.tpl`. `boilkit.templates.load_templates`
loads either the regular templates or the test templates. A template is a
test template when its first directory is `test` or ends in `_test`.

Every field of `TemplateData` is available as a variable, and the whole
object is also available as `data`. The helpers in `TEMPLATE_FUNCTIONS` are
globals, among them:

- `title_case`;
- `plural`;
- `join`;
- `once_put`;
- `uses_primitives`;
- `get_table`.

Template sources come from one of these loaders:

- `FileLoader` reads a file;
- `Base64Loader` decodes base64 text.

## Generating output

`boilkit.state.State` runs a generation from a `Config` and a list of
tables:

```python
from boilkit.config import Config
from boilkit.model import Column, Table
from boilkit.state import State

config = Config(pkg_name="models", out_folder="out", template_dirs=["templates"], no_tests=True)
tables = [Table(name="videos", columns=[Column(name="id", type="int")], pkey=("id",))]

State(config, tables=tables).run()
```

`run()` works in this order:

1. It checks that every table has a primary key.
2. It adds the `"context"` import unless `no_context` is set.
3. It applies the type replacements.
4. It collects the templates from these sources:
   - `template_dirs`, or else the `builtin_templates` directory;
   - `driver_templates`, unless `no_driver_templates` is set;
   - `replacements`, each of the form `name;path`.
5. It creates the output folders, wiping the folder first when `wipe` is
   set.
6. It checks the tags and fills in the aliases.
7. It renders the output:
   - templates under a `singleton` directory are written once;
   - the other templates are written once per non-join table, to
     `<table><ext>` or `<table>_test<ext>`.

A `.go` output gets a do-not-edit header, a package line and an import
clause. With `debug` set, the state of the run is printed as JSON.

`boilkit.output` holds the file-level pieces:

- `output_filename_parts`;
- `get_long_ext`;
- `disclaimer`;
- `package_clause`;
- `imports_clause`;
- `write_file`;
- `execute_template`.

## Runtime helpers

- `boilkit.context` provides an immutable `Context`. It carries these
  settings:
  - debug output: `with_debug`, `is_debug`, `with_debug_writer`,
    `debug_writer_from`;
  - skipped hooks: `skip_hooks`, `hooks_are_skipped`;
  - skipped timestamps: `skip_timestamps`, `timestamps_are_skipped`.

  It also defines the `HookPoint` enum.
- `boilkit.db` keeps a process-wide database handle and timestamp zone:
  `set_db`, `get_db`, `begin`, `set_location`, `get_location`.
- `boilkit.errors` marks errors with `BoilError`, using `wrap_err` and
  `is_boil_err`.

## What boilkit does not do

- It does not connect to a database to read its schema. You pass the tables,
  schema and dialect to `State` yourself.
- It ships no templates of its own and no command-line program.
- Generated code is written exactly as the templates render it. It is not
  run through a code formatter.