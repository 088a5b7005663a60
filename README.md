# tunnelclient

Building blocks for the client side of a tunnelling proxy. The package has no
user interface and no command of its own. It provides these pieces for a
client to use.

## Signed data packages

`tunnelclient.signed_package` handles signed data packages.

- `verify_signed_data_package(signature_public_key, signed_package, gzipped)`
  decompresses the package. It uses gzip when `gzipped` is true and zlib
  otherwise, and output over 100 MiB is rejected.
- It then parses the package as a JSON object holding `data`, `signature` and
  `signingPublicKeyDigest`.
- It checks that the digest matches the given base64 DER public key, and then
  verifies the RSA PKCS#1 v1.5 / SHA-256 signature over `data`.
- It returns the authentic `data` string. Any failure raises
  `PackageVerificationError`.
- `public_key_digest(signature_public_key)` returns the base64 SHA-256 digest
  of the key text. This is the value a package must present.

## Tunnel core notices

`tunnelclient.core_notices.NoticeState` interprets the JSON notices that the
tunnel core helper writes, one per line.

- `handle_line(line)` parses a single line. `handle(notice_type, timestamp, data)`
  applies a notice that has already been parsed.
- The state it keeps:
  - `is_connected` and `has_ever_connected`
  - `socks_proxy_port` and `http_proxy_port`
  - `homepages`
  - `client_region` and `egress_regions`
  - `last_upstream_proxy_error_message`
- A notice for a lost or restored tunnel calls `set_reconnecting()` or
  `set_reconnected()` on an optional receiver.
- A "client upgrade downloaded" notice is handed once to `upgrade_handler`.
  The handler gets another chance if it returns False.
- Active authorization IDs are reported to an optional provider through
  `active_authorization_ids(active, inactive)`.
- A notice that a local proxy port is in use raises `TransportFailed` with
  `retry=False`.
- `reset_connection()` clears the connection flags.
- `inactive_authorization_ids(provided, active)` returns the provided IDs that
  are not in `active`.

## Diagnostics and feedback

- `tunnelclient.diagnostic_history`:
  - `DiagnosticHistory` is a thread-safe list of timestamped entries. It has
    `add`, `add_json` and `snapshot`.
  - The process-wide history is reached through `add_diagnostic_info`,
    `add_diagnostic_info_json` and `get_diagnostic_history`.
- `tunnelclient.system_info` holds the data classes `SystemInfo`,
  `NetworkInfo` and `UserGroupInfo`, and these helpers:
  - `internet_info_json` and `user_info_json` emit nulls when the info is
    `None`.
  - `client_platform(base_platform, system_info, legacy)` builds a string of
    the form `<base>_<os version>_<mshtml major>[_LEGACY]`.
- `tunnelclient.security_info`:
  - `decode_product_state` turns a security product's state word into provider
    names and flags for enabled and up-to-date.
  - `SecurityInfo.to_json` and `security_info_sets_json` build the report
    section.
- `tunnelclient.diagnostic_info`:
  - `DiagnosticSnapshot` collects everything above, together with
    `ConnectionProxy` and `MessageHistoryEntry` records.
  - `generate_feedback_json(feedback, email_address, survey_json, send_diagnostic_info, snapshot)`
    returns the feedback document as compact JSON with a random 16-hex-digit
    id. It returns an empty string when there is no feedback text and no
    diagnostics opt-in.

## Utilities

- `tunnelclient.single_instance.SingleInstance(name, lock_dir)` takes a named
  lock file and retries a few times. `is_another_instance_running()` reports
  whether the lock was already held. Use it as a context manager, or call
  `close()`.
- `tunnelclient.resource_url.resource_to_url(resource_name, url_query, url_fragment, exe_path)`
  builds a `res://<exe>/<name>[?query][#fragment]` URL.

## What the package does not do

- It does not start, watch or stop the tunnel core process.
- It does not connect tunnels.
- It does not upload feedback.
- It does not read system, network, user-group or security-product
  information from the operating system. The caller fills in the data
  classes.
- It does not store settings, and it has no command line or window.

## Installing

```
pip install .
```

To install the test dependencies as well:

```
pip install .[test]
```

## Example

```python
from tunnelclient.signed_package import verify_signed_data_package, PackageVerificationError
from tunnelclient.diagnostic_info import generate_feedback_json
from tunnelclient.single_instance import SingleInstance

try:
    data = verify_signed_data_package(public_key_b64, package_bytes, gzipped=False)
except PackageVerificationError as exc:
    print("rejected:", exc)

with SingleInstance("tunnelclient") as instance:
    if not instance.is_another_instance_running():
        report = generate_feedback_json("It works", "user@example.com", "", False)
```

## Running the tests

```
pytest
```