#!/usr/bin/python
#
# (C) 2018 Dan Boneh, Riad S. Wahby <rsw@cs.stanford.edu>

import sys
import time

try:
    import libVRFPy.primes as lprimes
    import libVRFPy.rsa as lrsa
    import libVRFPy.test_util as tu
    import libVRFPy.util as lutil
    import libVRFPy.vrf as lvrf
except ImportError as e:
    print("ERROR: Could not import libVRFPy. Try invoking as `python -m libVRFPy`.")
    print(str(e))
    sys.exit(1)

def main(run_submodules, nreps):
    fails = 0
    if run_submodules:
        fails += lutil.main(nreps)
        fails += lprimes.main(nreps)
        fails += lrsa.main(max(1, nreps // 4))

    # full-size key from known safe primes, and a short freshly made one
    start_time = time.time()
    short_key = lrsa.make_key(256)
    keygen_time = time.time() - start_time
    full_key = lrsa.RSAKey(*tu.fixture_primes).precompute()

    gv_expts = [ ("2048-bit fixture key", full_key)
               , ("256-bit fresh key", short_key)
               ]
    gv_times = [ ([], []) for _ in range(0, len(gv_expts)) ]

    def test_generate_verify():
        "generate_and_verify,full,short,full_tampered,short_tampered,deterministic"

        res = [None] * (2 * len(gv_expts) + 1)
        seed = lutil.rand.getrandbits(64)
        for (idx, (_, key)) in enumerate(gv_expts):
            start_time = time.time()
            proof = lvrf.generate(key, seed)
            stop_time = time.time()
            gv_times[idx][0].append(stop_time - start_time)

            start_time = time.time()
            res[idx] = proof.verify()
            stop_time = time.time()
            gv_times[idx][1].append(stop_time - start_time)

            # an adjacent seed must not verify against this value
            proof.seed = seed + 1
            res[len(gv_expts) + idx] = not proof.verify()

        res[-1] = lvrf.generate(full_key, seed) == lvrf.generate(full_key, seed)
        return res

    fails += tu.run_all_tests(nreps, "end-to-end", test_generate_verify)
    if sys.flags.optimize == 0:
        tu.show_warning("you should call Python with the -O flag to get reasonable timing numbers.")
    tu.show_timing("make_key(256)", [keygen_time])
    sys.stdout.write('\n')
    for (idx, (n, _)) in enumerate(gv_expts):
        tu.show_timing_pair(n, gv_times[idx])

    return fails

if __name__ == "__main__":
    run_all = False
    nr = 16
    for i in range(1, len(sys.argv)):
        if sys.argv[i] == "-a":
            run_all = True
        else:
            try:
                nr = int(sys.argv[i])
            except ValueError:
                nr = 16
    sys.exit(1 if main(run_all, nr) else 0)
