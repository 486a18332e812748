"""HTTP and TCP readiness probes and waiting for them to succeed."""