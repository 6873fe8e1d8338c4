# Console peripheral: input queue and batched output buffer
