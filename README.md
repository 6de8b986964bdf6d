# lustremon

Read Lustre server statistics and host CPU and memory use out of a
proc tree (`/proc` or any directory laid out like it). Track counters
over time as rates, and record metric records to a file and play them
back.

## Install

```
pip install .
```

## Command line

`lmtmetric` prints the `sysstat` metric: CPU use and memory use in
percent.

```
lmtmetric                         # print once: CPU use since boot, memory use now
lmtmetric -t 5                    # print every 5 seconds, CPU use since the last print
lmtmetric -r /tmp/fakeproc        # read stat and meminfo below another root
```

Output looks like this:

```
sysstat: cpu_util: 3.17% mem_util: 41.52%
```

Options:

- `-m, --metric NAME`: the metric to print. `sysstat` is the only one
  accepted, and it is the default. Any other name prints the usage text
  and exits with status 1.
- `-r, --proc-root DIR`: the proc root to read from. The default is `/proc`.
- `-t, --update-period SECS`: print again every SECS seconds. With 0,
  the default, it prints once and exits.

If a file cannot be read or parsed, a message goes to standard error
and the command goes on to the next period.

## Modules

- `lustremon.proc`: `ProcFS(root)` reads files below a root with
  `read`, `readline`, `lines`, `exists` and `listdir`. `listdir` takes a
  `ReaddirFlag` (`NODIR`, `NOFILE`), leaves out names that start with a
  dot, and returns the names sorted. When a file is there but does not
  hold what was expected, the readers raise `ProcParseError`. It is an
  `OSError` with errno `EIO`.
- `lustremon.sysinfo`: `read_meminfo(proc)` returns `(MemTotal,
  MemFree)` in kB. `read_cpu_stat(proc)` returns a `CpuStat`, which has
  `usage` and `total`. `CpuUtilization().update(proc)` returns the
  percent of CPU used since the previous call.
- `lustremon.targets`: `lustre_version` and `packed_lustre_version`,
  plus `packed_version`. `backfs_type` returns a `BackFs`. `mdt_dir` and
  `osd_dir` pick the directories for the running version. `ost_list`,
  `mdt_list`, `osc_list` and `mdt_export_list` list targets.
  `read_keyvals` and `parse_stat_line` read files of "key value" lines.
- `lustremon.values`: per-target values. `files` and `kbytes` return
  (free, total). `num_exports`, `ldlm_lock_count`, `ldlm_grant_rate`
  and `ldlm_cancel_rate` return counts. `uuid` returns the target uuid
  without `_UUID`. `osc_info` returns an `OscInfo` with `uuid` and
  `state`. `lnet_newbytes` and `lnet_routing_enabled` read LNET figures.
  A name that contains neither `-OST` nor `-MDT` raises `ValueError`.
  If an LDLM file is missing, its value reads as 0.
- `lustremon.stats`: `hash_stats(proc, name)` returns a target's
  `stats` file as a dict. On Lustre 2.x MDTs it drops the `mds_` prefix
  from the keys. Before 2.0.56 it also sums in the per-export counters.
  `hash_recovery(proc, name)` returns the `recovery_status` entries.
  `parse_stat(stats, key)` returns a `StatCounter` (count, min, max,
  sum, sumsq), or raises `KeyError` if the key is absent.
- `lustremon.sample`: `Sample(stale_secs)` holds the last two points of
  a counter. `update(val, t)` adds a point. `value(tnow)` returns the
  newest value and `rate(tnow)` the change per second; both return 0
  once the data is stale. `add`, `max` and `min` combine two samples
  taken at the same times. `val_cmp` and `rate_cmp` compare two samples
  for sorting.
- `lustremon.playback`: `MetricRecord` (tnow, trcv, node, name, value),
  with `format_record`, `parse_record` and `write_record` for recording
  lines. `Playback(stream)` reads a recording back one batch at a time
  with `read_batch()`; a batch is the records that share one wall clock
  time. `rewind(count)` and `rewind_to(target)` step back through the
  batches already read.
- `lustremon.metric`: `sysstat(proc, cpu)` returns the metric string.
  `main()` is the `lmtmetric` command.

## Library use

```python
from lustremon.proc import ProcFS
from lustremon import targets, values, stats, sysinfo

proc = ProcFS("/proc")

print(targets.lustre_version(proc))
for name in targets.ost_list(proc):
    free, total = values.kbytes(proc, name)
    counters = stats.hash_stats(proc, name)
    if "read_bytes" in counters:
        print(name, free, total, stats.parse_stat(counters, "read_bytes"))

total_kb, free_kb = sysinfo.read_meminfo(proc)
cpu = sysinfo.CpuUtilization()
print(cpu.update(proc))
```

Missing files raise `FileNotFoundError`. Files that cannot be parsed
raise `ProcParseError`. No function returns a status code.

## What it does not do

- There is no interactive terminal view of OSTs, OSSs and MDTs. Nothing
  here sorts, summarises or tags per-target records, and nothing
  formats screen lines. `Playback` reads recordings, but nothing here
  decodes the metric values inside them.
- `brw_stats` histograms are not read.
- `lmtmetric` prints only `sysstat`. It cannot build `ost`, `mdt`,
  `osc` or `router` metric strings, and it does not publish metrics to
  any collection service.

## Tests

```
pip install .[test]
pytest
```