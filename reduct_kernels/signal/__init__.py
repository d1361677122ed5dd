from reduct_kernels.signal.transforms import convolve_f64, fft_f64, ifft_f64

__all__ = ["convolve_f64", "fft_f64", "ifft_f64"]
