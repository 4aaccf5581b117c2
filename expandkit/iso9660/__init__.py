"""Readers for ISO9660 and High Sierra descriptors and records."""