# gedupgrade

Converts GEDCOM 5.5.1 files to GEDCOM 7.0. The conversion does not validate
the input.

## What it does

- Works out the character encoding from the byte-order mark, the byte layout
  and the `HEAD.CHAR` line. It reads ANSEL, UTF-8, UTF-16, UTF-32 and ASCII,
  and always writes UTF-8 with a byte-order mark.
- Joins `CONC`/`CONT` continuation lines, and splits payloads into `CONT`
  lines again on output.
- Turns tags to upper case. A tag with characters outside `[A-Za-z0-9_]`
  ends the output with a `_PARSE_ERROR` line.
- Renames `FORM.TYPE` to `FORM.MEDI`, and `_ASSO`, `_CRE`, `_CREAT`,
  `_DATE`, `EMAI`, `_EMAIL`, `_INIT` and `_UID` to their standard tags.
- Drops structures that GEDCOM 7.0 no longer has: `SUBN`, `HEAD.CHAR`,
  `HEAD.FILE` and `HEAD.GEDC.FORM`.
- Rewrites `DATE` (also `SDATE`, `CHAN`, `CREA`) and `AGE` payloads in the
  7.0 syntax. Text that cannot be kept is put in a `PHRASE`.
- Replaces `OBJE.FILE.FORM` format names with media types, and turns file
  names in `FILE` into URLs.
- Changes `FONE` and `ROMN` into `TRAN` with a `LANG`, `RELA` into `ROLE`,
  and `RFN`, `RIN`, `AFN` and some vendor id tags into `EXID` with a `TYPE`.
- Turns `NOTE` records and pointer-valued `NOTE` structures into `SNOTE`,
  and a text-valued `INDI.ALIA` into a `NAME` with `TYPE AKA`.
- Normalises enumerated values (`SEX`, `PEDI`, `MEDI`, `RESN`, `ROLE`,
  `FAMC.ADOP`, `FAMC.STAT`, `NAME.TYPE`, ordinance `STAT`). Values it does
  not know become `OTHER` with a `PHRASE`.
- Moves inline source citations and multimedia objects into records of
  their own.
- Replaces cross-reference identifiers that 7.0 does not allow with `X1`,
  `X2` and so on.
- Writes a single `HEAD.GEDC` holding `VERS 7.0`.

## What it does not do

- It does not replace language names in `LANG` with BCP 47 tags; `LANG`
  payloads are written as they were read.
- It does not add a `SCHMA` for extension tags; existing `SCHMA`
  structures are passed through.

## Installing

```
pip install .
```

## Command line

```
gedupgrade [options] [infile.ged] [outfile.ged]
```

With no input file it reads standard input. With no output file it writes
to standard output. It will not write over an existing output file unless
you pass `--force`.

Options:

- `-h`, `--help`: print the usage message.
- `-f`, `--force`: overwrite an existing output file. This option cannot be
  used when writing to standard output.
- `-x`, `--xreficase`: compare cross-reference identifiers without regard
  to case.
- `-p`, `--fewphrases`: in `ROLE`, keep a `PHRASE` only when the value
  became `OTHER`.

Exit status: 0 on success, 1 after `--help`, 2 if the input cannot be
read, 3 if the output cannot be created, 4 for an extra argument, 5 for
`--force` with standard output, 6 if the encoding cannot be worked out.

Example:

```
gedupgrade family-551.ged family-70.ged
```

## From Python

```python
from gedupgrade.convert import convert

with open("family-551.ged", "rb") as source, open("family-70.ged", "wb") as dest:
    convert(source, dest, xref_case_insensitive=False, few_phrases=False)
```

The input must be a seekable binary stream, because the converter reads it
twice. `convert` raises `gedupgrade.decoding.EncodingDetectionError` when
the encoding cannot be worked out.

The smaller pieces can be used on their own:

- `gedupgrade.decoding.DecodingReader`: decodes a byte stream.
- `gedupgrade.parser.EventSource`: reads lines as parse events.
- `gedupgrade.writer.EventSink`: writes parse events as GEDCOM.
- `gedupgrade.dates.parse_date` and `gedupgrade.age.parse_age`: parse
  payloads; the results have a `to_payload()` method.
- `gedupgrade.convert.build_pipeline`: the list of `Stage` objects. Each
  filter is called as `filter(event, emit)`.