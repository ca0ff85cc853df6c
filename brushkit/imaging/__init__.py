"""Encoders for PNG, BMP, TGA, Radiance HDR and baseline JPEG images."""