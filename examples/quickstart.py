"""Quickstart example for cafsynth.

This example builds a small metadata store and a test case in code, then
synthesises the same test case for each target.

Note: Examples build stores in code for brevity. In a fuzzing setup the
store is loaded once from the API-extraction JSON with load_store_file().
"""

from cafsynth import (
    FunctionCall,
    FunctionSignature,
    MetadataStore,
    SynthesisConfig,
    TestCase,
    ValueKind,
    ValueKindSet,
    ValuePool,
    synthesise_test_case,
)

# Example 1: Metadata store
print("=" * 50)
print("Example 1: Metadata Store")
print("=" * 50)

store = MetadataStore()
any_receiver = ValueKindSet.create_full()

read_sig = FunctionSignature(any_receiver.copy())
read_sig.add_param_kinds(ValueKindSet.from_kinds([ValueKind.STRING]))
read_id = store.add_signature(read_sig)

log_sig = FunctionSignature(any_receiver.copy())
log_sig.add_param_kinds(any_receiver.copy())
log_id = store.add_signature(log_sig)

read = store.add_function("fs.readFileSync", read_id)
log = store.add_function("print", log_id)
store.publish()

print(store.get_statistics())

# Example 2: Test case with a shared value and a call result
print("\n" + "=" * 50)
print("Example 2: Plain JavaScript")
print("=" * 50)

pool = ValuePool()
path = pool.create_string("/etc/hosts")
tc = TestCase()
tc.add_function_call(FunctionCall(read.id, (path,)))
tc.add_function_call(FunctionCall(log.id, (pool.create_array([path, path]),)))
tc.add_function_call(FunctionCall(log.id, (pool.create_placeholder(0),)))

print(synthesise_test_case(tc, store, "js"), end="")
# Output:
# let v0 = "/etc/hosts";
# let v1 = fs.readFileSync(v0);
# let v2 = [];
# v2.push(v0);
# v2.push(v0);
# let v3 = print(v2);
# let v4 = print(v1);

# Example 3: Node.js imports built-in modules on first use
print("\n" + "=" * 50)
print("Example 3: Node.js")
print("=" * 50)

print(synthesise_test_case(tc, store, "nodejs"), end="")

# Example 4: Headless Chrome with progress markers
print("\n" + "=" * 50)
print("Example 4: Chrome")
print("=" * 50)

config = SynthesisConfig(chrome_progress_markers=True)
print(synthesise_test_case(tc, store, "chrome", config), end="")
