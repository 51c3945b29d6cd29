"""Prompt templates for the four generation stages, in Vietnamese and English."""

from seowizard.config import get_brand_config
from seowizard.models import OutputLanguage


def _brand(language: OutputLanguage) -> dict:
    brand = get_brand_config()
    persona = dict(brand[OutputLanguage(language).value])
    persona["website_url"] = brand["website_url"]
    return persona


def system_instruction(language: OutputLanguage) -> str:
    brand_name = _brand(language)["brand_name"]
    if OutputLanguage(language) is OutputLanguage.VI:
        return (
            f"Bạn là đại diện của {brand_name} - Chuyên trang về chạy bộ uy tín nhất. "
            "Nhiệm vụ của bạn là thực hiện các bước nghiên cứu và viết bài chuyên sâu."
        )
    return (
        f"You are the representative of {brand_name} - The most prestigious running website. "
        "Your task is to execute research and writing steps according to detailed requests."
    )


def research_prompt(keyword: str, language: OutputLanguage) -> str:
    """Step 1: data ingestion, remembered by the model as 'DS1'."""
    if OutputLanguage(language) is OutputLanguage.VI:
        return f"""STEP 1:

Read detailed data in Vietnamese. I will ask you to use this content in the next or future requests. Call this data is 'DS1'.

{{{{
Tìm kiếm và tổng hợp thông tin chi tiết về chủ đề: "{keyword}".
Bao gồm: đặc điểm chính, thông số kỹ thuật (nếu có), lợi ích, đối tượng khách hàng, các số liệu mới nhất 2024-2025 và các thông tin liên quan khác. Nguồn thông tin càng chi tiết, bài viết càng chất lượng.
}}}}"""

    return f"""STEP 1:

Read detailed data in English. I will ask you to use this content in the next or future requests. Call this data is 'DS1'.

{{{{
Search and summarize detailed information about the topic: "{keyword}".
Include: key features, specifications (if any), benefits, target audience, latest 2024-2025 data, and other relevant info.
}}}}"""


def ideation_prompt(keyword: str, language: OutputLanguage) -> str:
    """Step 2: keyword/entity/intent analysis, remembered as 'DDD1'."""
    if OutputLanguage(language) is OutputLanguage.VI:
        return f"""STEP 2:

Ideation: [ {keyword} ].

**A. KEYWORD ANALYSIS:**
- List 5-7 semantic keywords (từ khóa ngữ nghĩa liên quan trực tiếp)
- List 5-7 LSI keywords (từ khóa liên quan ngữ cảnh)
- List 5-7 long-tail keyword variations

**B. ENTITY MAPPING:**
- List 5-7 primary entities (thực thể chính, sắp xếp theo mức độ quan trọng)
- List 5-7 related entities (thực thể liên quan)
- List 3-5 contextual entities (thực thể bổ sung ngữ cảnh)

**C. SEARCH INTENT ANALYSIS:**
- List 4-6 search intents (sắp xếp từ quan trọng nhất đến ít quan trọng nhất)
- Với mỗi intent, xác định: [Informational / Commercial / Transactional / Navigational]

**D. PEOPLE ALSO ASK:**
- List 5-7 câu hỏi mà người dùng thường tìm kiếm liên quan đến keyword chính

**E. KNOWLEDGE GRAPH SIGNALS:**
- List 20 EAV (Entity - Attribute - Value)
- List 20 ERE (Entity - Relation - Entity)
- List 20 Semantic Triple (Subject - Predicate - Object)

Temporarily call the above data 'DDD1'. I will ask you to use it in the next or future prompt.

**Conditions:** No descriptions. No repeats. All items must be unique and relevant. Writing in Vietnamese."""

    return f"""STEP 2:

Ideation: [ {keyword} ].

**A. KEYWORD ANALYSIS:**
- List 5-7 semantic keywords
- List 5-7 LSI keywords
- List 5-7 long-tail keyword variations

**B. ENTITY MAPPING:**
- List 5-7 primary entities (prioritized)
- List 5-7 related entities
- List 3-5 contextual entities

**C. SEARCH INTENT ANALYSIS:**
- List 4-6 search intents (prioritized)
- Identify: [Informational / Commercial / Transactional / Navigational]

**D. PEOPLE ALSO ASK:**
- List 5-7 common user questions

**E. KNOWLEDGE GRAPH SIGNALS:**
- List 20 EAV (Entity - Attribute - Value)
- List 20 ERE (Entity - Relation - Entity)
- List 20 Semantic Triple (Subject - Predicate - Object)

Temporarily call the above data 'DDD1'.
**Conditions:** No descriptions. No repeats. All items must be unique and relevant. Writing in English."""


def outline_prompt(language: OutputLanguage) -> str:
    """Step 3: outline 'OL1' built on DDD1, one image marker per H2."""
    if OutputLanguage(language) is OutputLanguage.VI:
        return """STEP 3:

As an SEO expert specializing in content strategy, create a detailed content outline based on DDD1.

**OUTLINE REQUIREMENTS:**

1. **Structure Logic:**
   - H2 đầu tiên phải đáp ứng Search Intent quan trọng nhất của DDD1
   - Các H2 tiếp theo sắp xếp theo thứ tự Search Intent từ quan trọng đến ít quan trọng
   - Đảm bảo flow logic từ trên xuống dưới
   - Tạo H3 chỉ khi thực sự cần thiết

2. **Content Coverage:**
   - Outline phải cover đúng topic của primary keyword
   - Tích hợp Close Entities, Salient Entities, Semantic keywords từ DDD1
   - Đảm bảo Content Gap coverage

3. **E-E-A-T Markers (Lưu ý cho AI writer sau này):**
   - [DATA] - vị trí cần số liệu, facts cụ thể
   - [EXPERT] - vị trí cần insight chuyên môn
   - [EXAMPLE] - vị trí cần ví dụ thực tế

4. **Visual Strategy (QUAN TRỌNG):**
   - **MỖI thẻ H2 (Main Heading) PHẢI CÓ 1 vị trí chèn ảnh.**
   - Đánh dấu bằng marker: [IMAGE_PROMPT]

5. **Placement Markers:**
   - [CTA] - vị trí đặt call-to-action
   - [INTERNAL-LINK] - vị trí phù hợp để internal link

6. **Word Count Estimate:**
   - Ghi estimated word count cho mỗi H2

**RESTRICTIONS:**
- Không dùng thuật ngữ SEO chuyên môn trong heading
- Heading phải tự nhiên, dễ đọc
- Không dùng clickbait

Let's temporarily call the detailed outline above "OL1". I will ask you to use it in the next or future prompt. Writing in Vietnamese."""

    return """STEP 3:

As an SEO expert specializing in content strategy, create a detailed content outline based on DDD1.

**OUTLINE REQUIREMENTS:**

1. **Structure Logic:**
   - First H2 must answer the most critical Search Intent.
   - Subsequent H2s sorted by priority.
   - Logical flow.

2. **Content Coverage:**
   - Cover primary keyword topic.
   - Integrate Entities & Semantic keywords.

3. **E-E-A-T Markers (Instructions for future writer):**
   - [DATA] - specific stats/facts
   - [EXPERT] - expert insights
   - [EXAMPLE] - real examples

4. **Visual Strategy (IMPORTANT):**
   - **EVERY H2 (Main Heading) MUST HAVE an image placeholder.**
   - Use marker: [IMAGE_PROMPT]

5. **Placement Markers:**
   - [CTA]
   - [INTERNAL-LINK]

6. **Word Count Estimate:**
   - Estimate words for each H2.

**RESTRICTIONS:**
- No SEO jargon in headings.
- Headings must be natural.

Call this "OL1". Writing in English."""


def writing_prompt(keyword: str, language: OutputLanguage) -> str:
    """Step 4: the full article with meta block and image placeholders."""
    persona = _brand(language)
    brand_name = persona["brand_name"]
    website_url = persona["website_url"]
    industry = persona["industry"]
    audience = persona["audience"]

    if OutputLanguage(language) is OutputLanguage.VI:
        return f"""STEP 4:

**WRITER CONTEXT:**
- Brand/Author: {brand_name} (Sử dụng tên thương hiệu "Chúng tôi" hoặc "{brand_name}", KHÔNG dùng tên cá nhân)
- Website: {brand_name}
- Website URL: {website_url}
- Industry/Niche: {industry}
- Target Audience: {audience}

**CONTENT MISSION:**
Tạo nội dung chất lượng cao, cung cấp thông tin hữu ích và chính xác cho độc giả.

---

### OUTPUT FORMAT (Tuân thủ chính xác):
```
========== META DATA ==========
Meta Title: [55-65 ký tự, primary keyword ở đầu hoặc gần đầu]
Meta Description: [145-155 ký tự, chứa primary keyword + value proposition]
Slug: [url-friendly-format]
=============================

========== NỘI DUNG BÀI VIẾT ==========

[FEATURED_IMAGE_PROMPT: Mô tả cực kỳ chi tiết cho Ảnh Đại Diện (Thumbnail). BẮT BUỘC phải chứa hình ảnh liên quan trực tiếp đến từ khóa "{keyword}". Ảnh phải ấn tượng, 4K, phong cách nhiếp ảnh thể thao chuyên nghiệp.]

[Viết ngay đoạn Intro hấp dẫn khoảng 80-120 từ, chứa từ khóa chính. TUYỆT ĐỐI KHÔNG dùng các tiêu đề như "Intro", "Giới thiệu", "Phần mở đầu".]

---

## [H2-1 từ OL1]
[Nội dung chi tiết, sâu sắc, 250-400 từ]

[IMAGE_PROMPT: Mô tả hình ảnh minh họa cho H2 này. Ảnh cần sáng tạo, nghệ thuật.]

### [H3 nếu có]
[150-250 từ]

---

## [Tiếp tục cho TẤT CẢ các H2 còn lại trong OL1 - Mỗi H2 phải có 1 ảnh]

---

## Kết Luận
- Độ dài: 60-100 từ
- Tóm tắt giá trị chính
- CTA: khuyến khích comment, chia sẻ
- Mention website với link: [{brand_name}]({website_url})

========== KẾT THÚC BÀI VIẾT ==========
```

---

### WRITING RULES (Bắt buộc tuân thủ):

**1. XỬ LÝ MARKER (CỰC KỲ QUAN TRỌNG):**
- Trong Outline (OL1) có các thẻ như `[DATA]`, `[EXPERT]`, `[EXAMPLE]`.
- Nhiệm vụ của bạn là **THAY THẾ** các thẻ này bằng nội dung thực tế.
- **TUYỆT ĐỐI KHÔNG** in lại các từ khóa trong ngoặc vuông.
- Nếu gặp `[DATA]` -> Hãy đưa ra số liệu cụ thể từ DS1.
- Nếu gặp `[EXPERT]` -> Hãy viết lời khuyên chuyên gia từ {brand_name}.

**2. HÌNH ẢNH:**
- **BẮT BUỘC:**
  - Đầu bài viết phải có `[FEATURED_IMAGE_PROMPT: ...]` (Ảnh đại diện).
  - Sau mỗi phần H2, phải có dòng `[IMAGE_PROMPT: ...]` (Ảnh minh họa).
- Ảnh đại diện phải thể hiện rõ chủ đề "{keyword}".

**3. Tone & Voice:**
- Dùng ngôi "Chúng tôi" ({brand_name}) hoặc "Bạn" (người đọc).
- Giọng văn: Thể thao, năng động, chuyên nghiệp.

**4. Formatting:**
- **Bold** các từ khóa quan trọng.
- Sử dụng Markdown Table cho các dữ liệu so sánh/lịch tập.
- KHÔNG dùng câu quá dài (>40 từ).
- **KHÔNG sử dụng các nhãn như [INTRO], [BODY], [CONCLUSION].**

Writing in Vietnamese."""

    return f"""STEP 4:

**WRITER CONTEXT:**
- Brand/Author: {brand_name} (Use "We" or "{brand_name}", DO NOT use personal names)
- Website: {brand_name}
- Website URL: {website_url}
- Industry/Niche: {industry}
- Target Audience: {audience}

**CONTENT MISSION:**
Create high-quality content, providing useful and accurate info.

---

### OUTPUT FORMAT:
```
========== META DATA ==========
Meta Title: [55-65 chars]
Meta Description: [145-155 chars]
Slug: [url-friendly-format]
=============================

========== ARTICLE CONTENT ==========

[FEATURED_IMAGE_PROMPT: Detailed prompt for the Main Featured Image (Thumbnail). MUST specifically visualize the keyword "{keyword}". Must be impressive, professional sports photography style, 4K.]

[Start writing the introduction immediately (80-120 words). DO NOT use labels like "Intro" or "Introduction".]

---

## [H2-1 from OL1]
[Detailed content, 250-400 words]

[IMAGE_PROMPT: Detailed creative description for an image.]

### [H3 if needed]
[150-250 words]

---

## [Continue for ALL remaining H2s - Every H2 MUST have an image]

---

## Conclusion
- Summary
- CTA
- Mention website: [{brand_name}]({website_url})

========== END OF ARTICLE ==========
```

---

### WRITING RULES:

**1. MARKER HANDLING (CRITICAL):**
- The Outline (OL1) contains markers like `[DATA]`, `[EXPERT]`, `[EXAMPLE]`.
- You MUST **REPLACE** these markers with actual content.
- **DO NOT** output the bracketed tags in the final text.
- If you see `[DATA]` -> Write specific stats from DS1.
- If you see `[EXPERT]` -> Write expert advice from {brand_name}.

**2. IMAGES:**
- **MANDATORY:**
  - First line of content must be `[FEATURED_IMAGE_PROMPT: ...]`.
  - After every H2 section, include `[IMAGE_PROMPT: ...]`.
- **Important:** The Featured Image must clearly depict "{keyword}".

**3. Tone & Voice:**
- Use "We" ({brand_name}) and "You".
- Professional, energetic.

**4. Formatting:**
- **Bold** key terms.
- Use Markdown Tables for data.
- No sentences >40 words.
- **DO NOT use labels like [INTRO], [BODY], [CONCLUSION].**

Writing in English."""


def image_prompt(description: str, style_hint: str) -> str:
    return f'Generate a realistic image based on this description: "{description}". {style_hint}'
